"""
Account store implementations.

Provides an in-memory store (for testing and development), a file-backed
store (one JSON document per key under the data root) and a Supabase-backed
store (one row per key).
"""

import asyncio
import hashlib
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, Optional

import aiofiles
import aiofiles.os
from supabase import Client

from shared.repository import BaseRepository

from .exceptions import AccountStoreError
from .interfaces import IAccountStore

logger = logging.getLogger(__name__)


class InMemoryAccountStore:
    """
    Account store with in-memory storage.

    For testing and development. Values are deep-copied through JSON so
    callers never share mutable state with the store.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._items: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._items[key] = json.dumps(value)

    async def get_all(self, predicate: Callable[[str], bool]) -> list[Any]:
        return [
            json.loads(self._items[key])
            for key in sorted(self._items)
            if predicate(key)
        ]

    async def get(self, key: str) -> Optional[Any]:
        raw = self._items.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value)

    async def remove(self, key: str) -> None:
        self._items.pop(key, None)


class FileAccountStore:
    """
    Account store persisting each key as a JSON document on disk.

    Documents are named by the SHA-256 of their key and hold
    ``{"key": ..., "value": ...}``. Writes go through a temporary file and
    an atomic rename.
    """

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self._directory / hashlib.sha256(key.encode("utf-8")).hexdigest()

    async def _read(self, path: Path) -> dict[str, Any]:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return json.loads(await f.read())

    async def get_all(self, predicate: Callable[[str], bool]) -> list[Any]:
        if not await aiofiles.os.path.isdir(self._directory):
            return []

        documents = []
        for name in await aiofiles.os.listdir(self._directory):
            if name.endswith(".tmp"):
                continue
            try:
                document = await self._read(self._directory / name)
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable account document {name}: {e}")
                continue
            if predicate(document.get("key", "")):
                documents.append(document)

        documents.sort(key=lambda d: d["key"])
        return [d.get("value") for d in documents]

    async def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not await aiofiles.os.path.exists(path):
            return None
        try:
            document = await self._read(path)
        except (OSError, ValueError) as e:
            raise AccountStoreError(f"Failed to read account document: {e}", key)
        return document.get("value")

    async def set(self, key: str, value: Any) -> None:
        await aiofiles.os.makedirs(self._directory, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps({"key": key, "value": value}))
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            raise AccountStoreError(f"Failed to write account document: {e}", key)

    async def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise AccountStoreError(f"Failed to remove account document: {e}", key)


class SupabaseAccountStore(BaseRepository[Any]):
    """
    Account store backed by a Supabase key/value table.

    The table needs a text primary key column ``key`` and a jsonb column
    ``value``. The supabase client is synchronous, so queries run in the
    default executor.
    """

    def __init__(self, db: Client, table: str = "kv_store", page_size: int = 1000):
        super().__init__(db)
        self._table = table
        self._page_size = max(1, page_size)

    async def _run(self, query: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, query)

    async def get_all(self, predicate: Callable[[str], bool]) -> list[Any]:
        # PostgREST caps rows per response, so read in pages until a short one
        values = []
        offset = 0
        while True:
            end = offset + self._page_size - 1
            result = await self._run(
                lambda: self._db.table(self._table)
                .select("key, value")
                .order("key")
                .range(offset, end)
                .execute()
            )
            values.extend(row["value"] for row in result.data if predicate(row["key"]))
            if len(result.data) < self._page_size:
                return values
            offset += self._page_size

    async def get(self, key: str) -> Optional[Any]:
        result = await self._run(
            lambda: self._db.table(self._table).select("value").eq("key", key).limit(1).execute()
        )
        if not result.data:
            return None
        return result.data[0]["value"]

    async def set(self, key: str, value: Any) -> None:
        await self._run(
            lambda: self._db.table(self._table).upsert({"key": key, "value": value}).execute()
        )

    async def remove(self, key: str) -> None:
        await self._run(lambda: self._db.table(self._table).delete().eq("key", key).execute())


# Verify the implementations satisfy the interface
def _verify_interface(db: Client):
    """Type check that the stores implement IAccountStore."""
    stores: list[IAccountStore] = [
        InMemoryAccountStore(),
        FileAccountStore(Path(".")),
        SupabaseAccountStore(db),
    ]
    return stores
