"""Bounded-concurrency scheduler that drives documents to a terminal state.

Every claim decision happens in ``pump()``, a plain method with no await
between scanning for the next eligible document and claiming it. All
callers run on the event loop thread, so scan-and-claim is indivisible.
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Iterable
from contextlib import AsyncExitStack
from dataclasses import replace
from typing import Any

from atlas.analysis.backends import BackendRotation
from atlas.analysis.exceptions import AnalysisSkippedError
from atlas.analysis.invoker import AnalysisInvoker
from atlas.database.exceptions import StorageError
from atlas.database.repositories.base import BaseDocumentStore
from atlas.documents.models import (
    Category,
    Document,
    ProcessingStatus,
    Readable,
    Snippet,
    Unreadable,
)
from atlas.documents.review import approve_snippet, find_snippet_owner, recategorize_snippet
from atlas.logging.logger import Log
from atlas.scheduler.reconciliation import DEFAULT_TRANSIENT_SIGNATURES, reconcile
from atlas.scheduler.state import SchedulerSnapshot, SchedulerState, SyncState, SyncStatus

MAX_CONCURRENCY = 7
SKIPPED_READ_ERROR = "Skipping analysis due to file read error."

ChangeListener = Callable[[SchedulerSnapshot], None]


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ProcessingScheduler:
    """Selects pending documents, bounds parallelism and commits each outcome once."""

    def __init__(
        self,
        store: BaseDocumentStore,
        invoker: AnalysisInvoker,
        rotation: BackendRotation,
        *,
        max_concurrency: int = MAX_CONCURRENCY,
        transient_error_signatures: Iterable[str] = DEFAULT_TRANSIENT_SIGNATURES,
        on_change: ChangeListener | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._store = store
        self._invoker = invoker
        self._rotation = rotation
        self._max_concurrency = max_concurrency
        self._transient_signatures = tuple(transient_error_signatures)
        self._on_change = on_change
        self._state = SchedulerState()
        self._sync = SyncState()
        self._tasks: set[asyncio.Task[None]] = set()
        self._write_locks: dict[str, asyncio.Lock] = {}

    # -- presentation surface -------------------------------------------------

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._state.documents)

    @property
    def active_workers(self) -> int:
        return self._state.active_workers

    @property
    def sync_status(self) -> SyncStatus:
        return self._sync.status

    def status_of(self, document_id: str) -> ProcessingStatus | None:
        return self._state.statuses.get(document_id)

    def error_of(self, document_id: str) -> str | None:
        document = self._state.find(document_id)
        return document.error if document is not None else None

    def all_snippets(self) -> list[Snippet]:
        return [s for d in self._state.documents for s in d.snippets]

    def snapshot(self) -> SchedulerSnapshot:
        return SchedulerSnapshot(
            statuses=dict(self._state.statuses),
            errors={d.id: d.error for d in self._state.documents if d.error},
            active_workers=self._state.active_workers,
            pending_count=sum(
                1 for s in self._state.statuses.values() if s is ProcessingStatus.PENDING
            ),
            sync_status=self._sync.status,
            last_saved=self._sync.last_saved,
        )

    # -- inbound events ---------------------------------------------------------

    async def load(self) -> None:
        """Rehydrate from the store, resetting transient failures to pending."""
        try:
            stored = await self._store.get_all()
        except StorageError as exc:
            Log.error(f"Could not load documents from store: {exc}")
            self._sync.status = SyncStatus.ERROR
            self._notify()
            return

        documents, reset = reconcile(stored, self._transient_signatures)
        self._state.documents = documents
        self._state.statuses = {d.id: ProcessingStatus.of(d) for d in documents}
        self._sync.mark_saved()
        Log.info(f"Loaded {len(documents)} documents ({len(reset)} reset for retry)")
        self._notify()
        self.pump()

    def upload(self, documents: Iterable[Document]) -> list[Document]:
        """Track newly read documents and persist them in the background.

        Returns the accepted documents without waiting for the commit;
        a failed commit only shows up in the sync status. Must be called
        from within the running event loop.
        """
        accepted = [d for d in documents if not d.content.is_empty()]
        if not accepted:
            return []

        self._state.documents.extend(accepted)
        for document in accepted:
            self._state.statuses[document.id] = (
                ProcessingStatus.ERROR
                if isinstance(document.content, Unreadable)
                else ProcessingStatus.PENDING
            )
        Log.info(f"Accepted {len(accepted)} uploaded documents")
        self._spawn(self._persist_uploads(accepted))
        self._notify()
        self.pump()
        return accepted

    async def delete(self, document_id: str) -> None:
        async with self._lock_for(document_id):
            await self._sync_operation(lambda: self._store.delete(document_id))
            self._state.remove(document_id)
        self._notify()

    async def clear_all(self) -> None:
        """Clear the store, then drop every tracked document from memory.

        Write locks of the tracked documents are held throughout, so no
        commit lands between the store clear and the in-memory reset.
        """
        async with AsyncExitStack() as stack:
            for document_id in sorted(d.id for d in self._state.documents):
                await stack.enter_async_context(self._lock_for(document_id))
            await self._sync_operation(self._store.clear)
            self._state.reset()
        self._notify()

    async def update_document(self, document: Document) -> bool:
        """Replace a tracked document (reviewer edits) and persist it."""
        async with self._lock_for(document.id):
            if not self._state.replace_document(document):
                Log.warning(f"Ignoring update for unknown document {document.id}")
                return False
            self._notify()
            await self._sync_operation(lambda: self._store.upsert(document))
        self._notify()
        return True

    async def approve_snippet(self, snippet_id: str) -> bool:
        owner = find_snippet_owner(self._state.documents, snippet_id)
        if owner is None:
            return False
        return await self.update_document(approve_snippet(owner, snippet_id))

    async def recategorize_snippet(self, snippet_id: str, category: str | Category) -> bool:
        owner = find_snippet_owner(self._state.documents, snippet_id)
        if owner is None:
            return False
        return await self.update_document(recategorize_snippet(owner, snippet_id, category))

    async def wait_idle(self) -> None:
        """Wait until no analysis or background commit is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -- dispatch loop ----------------------------------------------------------

    def pump(self) -> int:
        """Claim and dispatch eligible documents until the ceiling is reached.

        Returns the number of documents dispatched by this call.
        """
        dispatched = 0
        while self._state.active_workers < self._max_concurrency:
            document = self._next_eligible()
            if document is None:
                break
            self._claim(document)
            self._spawn(self._process(document))
            dispatched += 1
        if dispatched:
            self._notify()
        return dispatched

    def _next_eligible(self) -> Document | None:
        for document in self._state.documents:
            if document.is_processed or document.id in self._state.claimed:
                continue
            status = self._state.statuses.get(document.id)
            if status in (ProcessingStatus.PROCESSING, ProcessingStatus.ERROR):
                continue
            return document
        return None

    def _claim(self, document: Document) -> None:
        self._state.claimed.add(document.id)
        self._state.active_workers += 1
        self._state.statuses[document.id] = ProcessingStatus.PROCESSING

    def _release(self, document_id: str) -> None:
        self._state.claimed.discard(document_id)
        self._state.active_workers -= 1

    async def _process(self, document: Document) -> None:
        try:
            try:
                updated = await self._analyze(document)
                status = ProcessingStatus.DONE
                Log.info(f"Document {document.name} done: {len(updated.snippets)} snippets")
            except Exception as exc:
                message = error_message(exc)
                Log.error(f"Worker failed for {document.name}: {message}")
                updated = replace(document, is_processed=True, error=message)
                status = ProcessingStatus.ERROR
            await self._commit_transition(updated, status)
        finally:
            self._release(document.id)
            self._notify()
            self.pump()

    async def _analyze(self, document: Document) -> Document:
        if not isinstance(document.content, Readable):
            raise AnalysisSkippedError(SKIPPED_READ_ERROR)
        backend = self._rotation.next()
        Log.info(
            f"Assigning document {document.name} to {backend.provider} ({backend.model})"
        )
        result = await self._invoker.analyze(
            document.content.text, document.id, document.name, backend
        )
        return replace(
            document,
            snippets=tuple(result.snippets),
            grounding_sources=tuple(result.grounding_sources),
            is_processed=True,
            error=None,
        )

    async def _commit_transition(self, updated: Document, status: ProcessingStatus) -> None:
        async with self._lock_for(updated.id):
            if not self._state.replace_document(updated):
                Log.warning(f"Document {updated.name} was removed while processing, discarding result")
                return
            self._state.statuses[updated.id] = status
            try:
                await self._store.upsert(updated)
                self._sync.mark_saved()
            except StorageError as exc:
                Log.error(f"Could not persist {updated.name}: {exc}")
                self._sync.status = SyncStatus.ERROR

    # -- persistence helpers -----------------------------------------------------

    async def _persist_uploads(self, documents: list[Document]) -> None:
        self._sync.status = SyncStatus.SYNCING
        self._notify()
        for document in documents:
            async with self._lock_for(document.id):
                # A later transition already committed (or removed) this document.
                if self._state.find(document.id) is not document:
                    continue
                try:
                    await self._store.upsert(document)
                except StorageError as exc:
                    Log.error(f"Database operation failed: {exc}")
                    self._sync.status = SyncStatus.ERROR
                    self._notify()
                    return
        self._sync.mark_saved()
        self._notify()

    async def _sync_operation(self, operation: Callable[[], Awaitable[None]]) -> bool:
        self._sync.status = SyncStatus.SYNCING
        try:
            await operation()
        except StorageError as exc:
            Log.error(f"Database operation failed: {exc}")
            self._sync.status = SyncStatus.ERROR
            return False
        self._sync.mark_saved()
        return True

    def _lock_for(self, document_id: str) -> asyncio.Lock:
        return self._write_locks.setdefault(document_id, asyncio.Lock())

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
