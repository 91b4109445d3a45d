"""Converts Documents to and from the JSONB payload stored per row."""

from typing import Any

from atlas.documents.models import (
    Category,
    Document,
    DocumentContent,
    GroundingSource,
    Readable,
    Relevance,
    ReviewStatus,
    Snippet,
    Unreadable,
    content_from_text,
)


def document_to_payload(document: Document) -> dict[str, Any]:
    return {
        "id": document.id,
        "name": document.name,
        "mime_type": document.mime_type,
        "content": _content_to_payload(document.content),
        "snippets": [_snippet_to_payload(s) for s in document.snippets],
        "is_processed": document.is_processed,
        "error": document.error,
        "grounding_sources": (
            None
            if document.grounding_sources is None
            else [{"title": g.title, "url": g.url} for g in document.grounding_sources]
        ),
    }


def document_from_payload(payload: dict[str, Any]) -> Document:
    """Rebuild a Document; enum fields are re-coerced rather than trusted."""
    sources = payload.get("grounding_sources")
    return Document(
        id=str(payload["id"]),
        name=str(payload.get("name", "")),
        mime_type=str(payload.get("mime_type") or ""),
        content=_content_from_payload(payload.get("content", "")),
        snippets=tuple(_snippet_from_payload(s) for s in payload.get("snippets") or []),
        is_processed=bool(payload.get("is_processed", False)),
        error=payload.get("error") or None,
        grounding_sources=(
            None
            if sources is None
            else tuple(GroundingSource(title=g["title"], url=g["url"]) for g in sources)
        ),
    )


def _content_to_payload(content: DocumentContent) -> dict[str, str]:
    if isinstance(content, Unreadable):
        return {"kind": "unreadable", "reason": content.reason}
    return {"kind": "readable", "text": content.text}


def _content_from_payload(raw: Any) -> DocumentContent:
    # Plain strings are the legacy layout, read-error marker included.
    if isinstance(raw, str):
        return content_from_text(raw)
    if raw.get("kind") == "unreadable":
        return Unreadable(reason=str(raw.get("reason", "")))
    return Readable(text=str(raw.get("text", "")))


def _snippet_to_payload(snippet: Snippet) -> dict[str, Any]:
    return {
        "id": snippet.id,
        "source_doc_id": snippet.source_doc_id,
        "source_doc_name": snippet.source_doc_name,
        "headline": snippet.headline,
        "category": snippet.category.value,
        "content": snippet.content,
        "legal_citation": snippet.legal_citation,
        "relevance": snippet.relevance.value,
        "status": snippet.status.value,
    }


def _snippet_from_payload(raw: dict[str, Any]) -> Snippet:
    status = raw.get("status")
    return Snippet(
        id=raw["id"],
        source_doc_id=raw["source_doc_id"],
        source_doc_name=raw.get("source_doc_name", ""),
        headline=raw.get("headline", ""),
        category=Category.coerce(raw.get("category")),
        content=raw.get("content", ""),
        legal_citation=raw.get("legal_citation"),
        relevance=Relevance.coerce(raw.get("relevance")),
        status=ReviewStatus.APPROVED if status == "approved" else ReviewStatus.PENDING,
    )
