import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from atlas.database.connection import Database
from atlas.database.exceptions import StorageError
from atlas.database.repositories.base import BaseDocumentStore
from atlas.database.serialization import document_from_payload, document_to_payload
from atlas.documents.models import Document
from atlas.logging.logger import Log

T = TypeVar("T")

Operation = Callable[[psycopg.AsyncConnection[Any]], Awaitable[T]]


class PostgresDocumentStore(BaseDocumentStore):
    """Document persistence in the documents table, one JSONB payload per row.

    Every operation has its own timeout. Any failure discards the pool so
    the next call starts from a fresh connection.
    """

    def __init__(self, database: Database, timeout_seconds: float = 10.0) -> None:
        self._database = database
        self._timeout_seconds = timeout_seconds

    async def ensure_schema(self) -> None:
        async def op(conn: psycopg.AsyncConnection[Any]) -> None:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    payload JSONB NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            await conn.commit()

        await self._run("ensure_schema", op)

    async def get_all(self) -> list[Document]:
        async def op(conn: psycopg.AsyncConnection[Any]) -> list[Document]:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT id, payload
                    FROM documents
                    ORDER BY created_at, id
                    """
                )
                rows = await cur.fetchall()
            return _decode_rows(rows)

        return await self._run("get_all", op)

    async def upsert(self, document: Document) -> None:
        payload = Jsonb(document_to_payload(document))

        async def op(conn: psycopg.AsyncConnection[Any]) -> None:
            await conn.execute(
                """
                INSERT INTO documents (id, payload)
                VALUES (%s, %s)
                ON CONFLICT (id) DO UPDATE
                SET payload = EXCLUDED.payload, updated_at = NOW()
                """,
                (document.id, payload),
            )
            await conn.commit()

        await self._run("upsert", op)

    async def delete(self, document_id: str) -> None:
        async def op(conn: psycopg.AsyncConnection[Any]) -> None:
            await conn.execute("DELETE FROM documents WHERE id = %s", (document_id,))
            await conn.commit()

        await self._run("delete", op)

    async def clear(self) -> None:
        async def op(conn: psycopg.AsyncConnection[Any]) -> None:
            await conn.execute("DELETE FROM documents")
            await conn.commit()

        await self._run("clear", op)

    async def _run(self, name: str, operation: Operation[T]) -> T:
        try:
            async with asyncio.timeout(self._timeout_seconds):
                async with self._database.connection() as conn:
                    return await operation(conn)
        except TimeoutError as exc:
            await self._database.invalidate()
            raise StorageError(f"Database operation '{name}' timed out") from exc
        except (psycopg.Error, OSError) as exc:
            Log.error(f"Database operation '{name}' failed: {exc}")
            await self._database.invalidate()
            raise StorageError(f"Database operation '{name}' failed: {exc}") from exc


def _decode_rows(rows: list[dict[str, Any]]) -> list[Document]:
    """Decode stored payloads, skipping rows that no longer form a Document."""
    documents: list[Document] = []
    for row in rows:
        try:
            documents.append(document_from_payload(row["payload"]))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            Log.warning(f"Skipping undecodable document row {row.get('id')!r}: {exc!r}")
    return documents
