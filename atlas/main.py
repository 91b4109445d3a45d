import asyncio
import sys
from pathlib import Path

from atlas.analysis.backends import BackendRotation
from atlas.analysis.factory import build_invoker
from atlas.config.settings import Settings
from atlas.database.connection import Database
from atlas.database.exceptions import StorageError
from atlas.database.repositories.document_repository import PostgresDocumentStore
from atlas.ingestion.file_loader import FileLoader
from atlas.logging.logger import Log
from atlas.pdf.factory import PdfExtractorFactory
from atlas.scheduler.scheduler import ProcessingScheduler


def build_scheduler(settings: Settings, database: Database) -> ProcessingScheduler:
    """Wire store, rotation and invoker into a scheduler."""
    store = PostgresDocumentStore(database, timeout_seconds=settings.store_timeout_seconds)
    rotation = BackendRotation(counter_bound=settings.rotation_counter_bound)
    invoker = build_invoker(settings, rotation)
    return ProcessingScheduler(
        store,
        invoker,
        rotation,
        max_concurrency=settings.max_concurrency,
        transient_error_signatures=settings.transient_error_signatures,
    )


async def run(settings: Settings, paths: list[Path]) -> None:
    """Load stored work, ingest the given files, and process until idle."""
    database = Database(settings)
    try:
        try:
            await PostgresDocumentStore(
                database, timeout_seconds=settings.store_timeout_seconds
            ).ensure_schema()
        except StorageError as exc:
            Log.warning(f"Could not ensure document schema, continuing: {exc}")

        scheduler = build_scheduler(settings, database)
        await scheduler.load()

        if paths:
            loader = FileLoader(PdfExtractorFactory.create(settings))
            scheduler.upload(loader.load_all(paths))

        await scheduler.wait_idle()
        snapshot = scheduler.snapshot()
        Log.info(
            f"Processing finished: {snapshot.done_count} done, "
            f"{snapshot.error_count} failed, sync {snapshot.sync_status}"
        )
    finally:
        await database.close()


def main() -> None:
    """Entry point: settings -> logging -> scheduler run."""
    settings = Settings()
    Log.configure(settings.log_level)
    paths = [Path(arg) for arg in sys.argv[1:]]
    try:
        asyncio.run(run(settings, paths))
    except KeyboardInterrupt:
        Log.info("Scheduler shutting down")


if __name__ == "__main__":
    main()
