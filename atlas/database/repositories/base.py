from abc import ABC, abstractmethod

from atlas.documents.models import Document


class BaseDocumentStore(ABC):
    """Contract for durable document persistence keyed by document ID."""

    @abstractmethod
    async def get_all(self) -> list[Document]:
        """Return every stored document in stable insertion order.

        Raises:
            StorageError: on timeout or backend fault.
        """

    @abstractmethod
    async def upsert(self, document: Document) -> None:
        """Insert or overwrite the document with the same ID."""

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Remove one document; unknown IDs are ignored."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every document."""
