from __future__ import annotations

from typing import Iterable, Protocol

from .documents import Document, Etag
from .keys import Key, KeyPath


class DocumentStore(Protocol):
    """
    Key/value interface: one document persisted under each hierarchical key.
    """

    def contains(self, key: Key) -> bool:
        """True if a document is stored under `key`."""
        ...

    def get(self, key: Key) -> tuple[Document, Etag]:
        """Document and its etag, or an invalid pair when missing."""
        ...

    def set(self, key: Key, document: Document) -> Etag:
        """Blindly write `document` and return its new etag."""
        ...

    def check_and_set(self, key: Key, document: Document, etag: Etag) -> tuple[bool, Etag]:
        """Write only if the stored etag equals `etag`."""
        ...

    def remove(self, key: Key) -> bool:
        """Delete `key`; False if it was not there."""
        ...

    def enumerate(self, path: KeyPath, recursive: bool = True) -> Iterable[Key]:
        ...

    def enumerate_values(
        self, path: KeyPath, recursive: bool = True
    ) -> Iterable[tuple[Key, Etag, Document]]:
        ...

    def destroy(self) -> bool:
        """Delete every stored document, including the storage root."""
        ...


class AsyncDocumentStore(Protocol):
    async def contains(self, key: Key) -> bool: ...
    async def get(self, key: Key) -> tuple[Document, Etag]: ...
    async def set(self, key: Key, document: Document) -> Etag: ...
    async def check_and_set(self, key: Key, document: Document, etag: Etag) -> tuple[bool, Etag]: ...
    async def remove(self, key: Key) -> bool: ...

    async def enumerate(self, path: KeyPath, recursive: bool = True) -> list[Key]: ...
    async def enumerate_values(
        self, path: KeyPath, recursive: bool = True
    ) -> list[tuple[Key, Etag, Document]]: ...

    async def destroy(self) -> bool: ...
