from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from atlas.config.settings import Settings
from atlas.database.exceptions import StorageError
from atlas.main import build_scheduler, run
from atlas.scheduler.scheduler import ProcessingScheduler
from fakes import InMemoryDocumentStore


class _SchemaAwareStore(InMemoryDocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self.ensure_schema = AsyncMock()


def _make_database() -> MagicMock:
    database = MagicMock()
    database.close = AsyncMock()
    return database


class TestBuildScheduler:
    def test_wires_example_backends(self) -> None:
        settings = Settings(analysis_provider_override="example", max_concurrency=2)
        scheduler = build_scheduler(settings, _make_database())
        assert isinstance(scheduler, ProcessingScheduler)


class TestRun:
    @pytest.mark.asyncio
    async def test_processes_given_files_until_idle(self, tmp_path: Path) -> None:
        path = tmp_path / "opinion.txt"
        path.write_text("The court held that the statute applies.")
        store = _SchemaAwareStore()
        database = _make_database()

        with (
            patch("atlas.main.Database", return_value=database),
            patch("atlas.main.PostgresDocumentStore", return_value=store),
        ):
            await run(Settings(analysis_provider_override="example"), [path])

        (stored,) = store.rows.values()
        assert stored.name == "opinion.txt"
        assert stored.is_processed is True
        assert stored.error is None
        assert len(stored.snippets) == 1
        store.ensure_schema.assert_awaited_once()
        database.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_schema_failure_does_not_stop_run(self) -> None:
        store = _SchemaAwareStore()
        store.ensure_schema.side_effect = StorageError("Database operation 'ensure_schema' timed out")
        database = _make_database()

        with (
            patch("atlas.main.Database", return_value=database),
            patch("atlas.main.PostgresDocumentStore", return_value=store),
        ):
            await run(Settings(analysis_provider_override="example"), [])

        database.close.assert_awaited_once()
