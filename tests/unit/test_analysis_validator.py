"""Tests for snippet record normalization."""

from atlas.analysis.validator import (
    MISSING_CONTENT,
    UNTITLED_HEADLINE,
    build_snippets,
    extract_records,
    snippet_id,
)
from atlas.documents.models import Category, Relevance, ReviewStatus


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "headline": "Qualified immunity",
        "category": "Doctrine",
        "content": "Officials are shielded from liability...",
        "legal_citation": "457 U.S. 800",
        "relevanceScore": "High",
    }
    record.update(overrides)
    return record


def _build(records: list[object]) -> list:
    return build_snippets(records, "doc-1", "brief.pdf", "1700000000000")


class TestExtractRecords:
    def test_returns_snippet_list(self) -> None:
        assert extract_records({"snippets": [_record()]}) == [_record()]

    def test_missing_key_yields_empty(self) -> None:
        assert extract_records({"results": []}) == []

    def test_non_list_snippets_yields_empty(self) -> None:
        assert extract_records({"snippets": "none"}) == []

    def test_non_object_root_yields_empty(self) -> None:
        assert extract_records([_record()]) == []
        assert extract_records(None) == []


class TestBuildSnippets:
    def test_well_formed_record(self) -> None:
        (snippet,) = _build([_record()])
        assert snippet.id == "doc-1-snip-0-1700000000000"
        assert snippet.source_doc_id == "doc-1"
        assert snippet.source_doc_name == "brief.pdf"
        assert snippet.headline == "Qualified immunity"
        assert snippet.category is Category.DOCTRINE
        assert snippet.relevance is Relevance.HIGH
        assert snippet.legal_citation == "457 U.S. 800"
        assert snippet.status is ReviewStatus.PENDING

    def test_ids_follow_record_order(self) -> None:
        snippets = _build([_record(), _record(), _record()])
        assert [s.id for s in snippets] == [snippet_id("doc-1", i, "1700000000000") for i in range(3)]

    def test_unknown_category_becomes_uncategorized(self) -> None:
        (snippet,) = _build([_record(category="Torts")])
        assert snippet.category is Category.UNCATEGORIZED

    def test_missing_headline_and_content_use_fallbacks(self) -> None:
        (snippet,) = _build([_record(headline=None, content="")])
        assert snippet.headline == UNTITLED_HEADLINE
        assert snippet.content == MISSING_CONTENT

    def test_invalid_relevance_defaults_to_medium(self) -> None:
        (snippet,) = _build([_record(relevanceScore="Critical")])
        assert snippet.relevance is Relevance.MEDIUM

    def test_blank_citation_becomes_none(self) -> None:
        (snippet,) = _build([_record(legal_citation="  ")])
        assert snippet.legal_citation is None

    def test_non_object_record_is_fully_defaulted(self) -> None:
        (snippet,) = _build(["garbage"])
        assert snippet.headline == UNTITLED_HEADLINE
        assert snippet.content == MISSING_CONTENT
        assert snippet.category is Category.UNCATEGORIZED
        assert snippet.relevance is Relevance.MEDIUM
        assert snippet.legal_citation is None

    def test_non_string_fields_are_defaulted(self) -> None:
        (snippet,) = _build([_record(headline=42, category=["Doctrine"], relevanceScore=3)])
        assert snippet.headline == UNTITLED_HEADLINE
        assert snippet.category is Category.UNCATEGORIZED
        assert snippet.relevance is Relevance.MEDIUM
