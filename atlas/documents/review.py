"""Reviewer actions on extracted snippets.

Both helpers return a new Document; persisting it is the caller's job
(the scheduler routes them through its document update path).
"""

from collections.abc import Callable
from dataclasses import replace

from atlas.documents.models import Category, Document, ReviewStatus, Snippet


def find_snippet_owner(documents: list[Document], snippet_id: str) -> Document | None:
    for document in documents:
        if any(s.id == snippet_id for s in document.snippets):
            return document
    return None


def approve_snippet(document: Document, snippet_id: str) -> Document:
    """Mark one snippet as approved.

    Raises:
        KeyError: if the document holds no snippet with this ID.
    """
    return _update_snippet(
        document, snippet_id, lambda s: replace(s, status=ReviewStatus.APPROVED)
    )


def recategorize_snippet(document: Document, snippet_id: str, category: str) -> Document:
    """Move one snippet to another rubric category (unknown labels become Uncategorized)."""
    target = Category.coerce(category)
    return _update_snippet(document, snippet_id, lambda s: replace(s, category=target))


def _update_snippet(
    document: Document,
    snippet_id: str,
    change: Callable[[Snippet], Snippet],
) -> Document:
    found = False
    snippets: list[Snippet] = []
    for snippet in document.snippets:
        if snippet.id == snippet_id:
            snippet = change(snippet)
            found = True
        snippets.append(snippet)
    if not found:
        raise KeyError(f"Snippet {snippet_id} not found in document {document.id}")
    return replace(document, snippets=tuple(snippets))
