"""Normalizes loosely typed backend snippet records into Snippets.

Nothing here raises: every malformed field is coerced to an explicit
fallback so Snippet invariants hold whatever the backend returns.
"""

from typing import Any

from atlas.documents.models import Category, Relevance, Snippet

UNTITLED_HEADLINE = "Untitled Extraction"
MISSING_CONTENT = "No content extracted"


def extract_records(parsed: Any) -> list[Any]:
    """Return the raw snippet list, or an empty list when the structure is absent."""
    if not isinstance(parsed, dict):
        return []
    records = parsed.get("snippets")
    if not isinstance(records, list):
        return []
    return records


def build_snippets(
    records: list[Any],
    document_id: str,
    document_name: str,
    stamp: str,
) -> list[Snippet]:
    """Build one Snippet per raw record, in record order."""
    return [
        _build_snippet(raw, index, document_id, document_name, stamp)
        for index, raw in enumerate(records)
    ]


def snippet_id(document_id: str, index: int, stamp: str) -> str:
    return f"{document_id}-snip-{index}-{stamp}"


def _build_snippet(
    raw: Any,
    index: int,
    document_id: str,
    document_name: str,
    stamp: str,
) -> Snippet:
    if not isinstance(raw, dict):
        raw = {}
    return Snippet(
        id=snippet_id(document_id, index, stamp),
        source_doc_id=document_id,
        source_doc_name=document_name,
        headline=_text_or(raw.get("headline"), UNTITLED_HEADLINE),
        category=Category.coerce(raw.get("category")),
        content=_text_or(raw.get("content"), MISSING_CONTENT),
        legal_citation=_optional_text(raw.get("legal_citation")),
        relevance=Relevance.coerce(raw.get("relevanceScore")),
    )


def _text_or(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return fallback


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
