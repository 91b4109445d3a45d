"""Startup reset of documents that failed for a known transient reason."""

from collections.abc import Iterable
from dataclasses import replace

from atlas.documents.models import Document
from atlas.logging.logger import Log

DEFAULT_TRANSIENT_SIGNATURES: tuple[str, ...] = ("decommissioned", "Rate limit")


def is_transient_error(message: str | None, signatures: Iterable[str]) -> bool:
    """Case-sensitive substring match against the configured signatures only."""
    if not message:
        return False
    return any(signature in message for signature in signatures)


def reconcile(
    documents: list[Document],
    signatures: Iterable[str] = DEFAULT_TRANSIENT_SIGNATURES,
) -> tuple[list[Document], list[Document]]:
    """Return all documents with transient failures reset to pending, plus the reset ones."""
    signatures = tuple(signatures)
    reconciled: list[Document] = []
    reset: list[Document] = []
    for document in documents:
        if is_transient_error(document.error, signatures):
            Log.info(f"Resetting {document.name} to pending after transient error: {document.error}")
            document = replace(document, is_processed=False, error=None)
            reset.append(document)
        reconciled.append(document)
    return reconciled, reset
