from __future__ import annotations

from .codec import decode, encode
from .disk_store import DiskDocumentStore, KeyEnumeration, ValueEnumeration
from .documents import Document, Etag
from .errors import (
    EasyDBError,
    InvalidDocumentError,
    InvalidKeyError,
    InvalidKeyPathError,
    LockRecursionError,
    StoreConfigError,
)
from .interfaces import AsyncDocumentStore, DocumentStore
from .keys import Key, KeyPath
from .locks import SharedExclusiveLock
from .repositories import AsyncDiskDocumentStore
from .settings import StoreSettings, load_settings, make_settings

__all__ = [
    "encode",
    "decode",
    "Key",
    "KeyPath",
    "Document",
    "Etag",
    "DocumentStore",
    "AsyncDocumentStore",
    "DiskDocumentStore",
    "AsyncDiskDocumentStore",
    "KeyEnumeration",
    "ValueEnumeration",
    "SharedExclusiveLock",
    "StoreSettings",
    "make_settings",
    "load_settings",
    "EasyDBError",
    "InvalidKeyError",
    "InvalidKeyPathError",
    "InvalidDocumentError",
    "StoreConfigError",
    "LockRecursionError",
]
