from __future__ import annotations

import asyncio

from .disk_store import DiskDocumentStore
from .documents import Document, Etag
from .interfaces import AsyncDocumentStore
from .keys import Key, KeyPath
from .settings import StoreSettings


class AsyncDiskDocumentStore(AsyncDocumentStore):
    """
    Async wrapper around the disk-backed document store.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.

    Enumerations are collected into lists on the worker thread, since a lazy
    walk would otherwise touch the disk from the event loop.
    """

    def __init__(self, settings: StoreSettings | None = None, *, store: DiskDocumentStore | None = None) -> None:
        if store is None:
            if settings is None:
                raise ValueError("settings or store is required")
            store = DiskDocumentStore(settings)
        self._store = store

    @property
    def store(self) -> DiskDocumentStore:
        return self._store

    async def contains(self, key: Key) -> bool:
        return await asyncio.to_thread(self._store.contains, key)

    async def get(self, key: Key) -> tuple[Document, Etag]:
        return await asyncio.to_thread(self._store.get, key)

    async def set(self, key: Key, document: Document) -> Etag:
        return await asyncio.to_thread(self._store.set, key, document)

    async def check_and_set(self, key: Key, document: Document, etag: Etag) -> tuple[bool, Etag]:
        return await asyncio.to_thread(self._store.check_and_set, key, document, etag)

    async def remove(self, key: Key) -> bool:
        return await asyncio.to_thread(self._store.remove, key)

    async def enumerate(self, path: KeyPath, recursive: bool = True) -> list[Key]:
        keys = self._store.enumerate(path, recursive)
        return await asyncio.to_thread(list, keys)

    async def enumerate_values(
        self, path: KeyPath, recursive: bool = True
    ) -> list[tuple[Key, Etag, Document]]:
        values = self._store.enumerate_values(path, recursive)
        return await asyncio.to_thread(list, values)

    async def destroy(self) -> bool:
        return await asyncio.to_thread(self._store.destroy)
