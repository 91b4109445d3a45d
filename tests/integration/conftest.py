import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from atlas.config.settings import Settings
from atlas.database.connection import Database
from atlas.database.exceptions import StorageError
from atlas.database.repositories.document_repository import PostgresDocumentStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "legal_atlas_test")
    return Settings(store_timeout_seconds=5)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture
def id_prefix() -> str:
    return f"it-{uuid.uuid4().hex[:8]}"


@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    db = Database(test_settings)
    try:
        yield db
    finally:
        await db.close()


@pytest_asyncio.fixture
async def document_store(
    database: Database,
    test_settings: Settings,
    id_prefix: str,
) -> AsyncGenerator[PostgresDocumentStore, None]:
    store = PostgresDocumentStore(database, timeout_seconds=test_settings.store_timeout_seconds)
    try:
        await store.ensure_schema()
    except StorageError as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield store
    finally:
        async with database.connection() as conn:
            await conn.execute("DELETE FROM documents WHERE id LIKE %s", (f"{id_prefix}%",))
            await conn.commit()
