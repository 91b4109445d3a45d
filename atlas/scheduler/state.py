from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from atlas.documents.models import Document, ProcessingStatus


class SyncStatus(StrEnum):
    SYNCED = "synced"
    SYNCING = "syncing"
    ERROR = "error"


@dataclass
class SyncState:
    """Aggregate health of store commits, shown instead of per-document flags."""

    status: SyncStatus = SyncStatus.SYNCED
    last_saved: datetime | None = None

    def mark_saved(self) -> None:
        self.status = SyncStatus.SYNCED
        self.last_saved = datetime.now(UTC)


@dataclass
class SchedulerState:
    """Mutable scheduler state. Only touched from the event loop thread."""

    documents: list[Document] = field(default_factory=list)
    statuses: dict[str, ProcessingStatus] = field(default_factory=dict)
    claimed: set[str] = field(default_factory=set)
    active_workers: int = 0

    def find(self, document_id: str) -> Document | None:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None

    def replace_document(self, document: Document) -> bool:
        """Swap in a new version of a tracked document; False if it is gone."""
        for index, current in enumerate(self.documents):
            if current.id == document.id:
                self.documents[index] = document
                return True
        return False

    def remove(self, document_id: str) -> None:
        self.documents = [d for d in self.documents if d.id != document_id]
        self.statuses.pop(document_id, None)

    def reset(self) -> None:
        # Claims stay: in-flight workers still hold their slots until they finish.
        self.documents = []
        self.statuses = {}


@dataclass(frozen=True)
class SchedulerSnapshot:
    """Read-only view handed to the presentation layer."""

    statuses: dict[str, ProcessingStatus]
    errors: dict[str, str]
    active_workers: int
    pending_count: int
    sync_status: SyncStatus
    last_saved: datetime | None

    @property
    def processing_count(self) -> int:
        return sum(1 for s in self.statuses.values() if s is ProcessingStatus.PROCESSING)

    @property
    def done_count(self) -> int:
        return sum(1 for s in self.statuses.values() if s is ProcessingStatus.DONE)

    @property
    def error_count(self) -> int:
        return sum(1 for s in self.statuses.values() if s is ProcessingStatus.ERROR)
