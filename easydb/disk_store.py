from __future__ import annotations

import contextlib
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Callable, ContextManager, Iterable, Iterator

from . import codec
from .documents import Document, Etag
from .errors import InvalidDocumentError, InvalidKeyError, InvalidKeyPathError
from .file_io import advance_mtime, atomic_write_bytes, read_bytes
from .interfaces import DocumentStore
from .keys import Key, KeyPath
from .locks import SharedExclusiveLock
from .paths import ensure_dir, key_file, key_from_file, key_path_dir, prune_empty_dirs
from .settings import StoreSettings, load_settings

logger = logging.getLogger(__name__)


class DiskDocumentStore(DocumentStore):
    """
    Stores each document as one file under the storage root.

    - Key "a/b/c" lives at <root>/a/b/c<ext>; every segment is percent-encoded.
    - Etags are file modification times.
    - One shared/exclusive lock per instance: contains/get/enumerate read in
      parallel, set/check_and_set/remove/destroy run alone.
    - Missing keys and etag mismatches are return values. Filesystem errors
      propagate unchanged.
    """

    def __init__(self, settings: StoreSettings):
        self._settings = settings
        self._lock = SharedExclusiveLock()

        root = settings.storage_root
        if not root.is_dir():
            ensure_dir(root)
            logger.info("STORE INIT: created storage root %s", root)

    @classmethod
    def from_env(cls, env_file: str | None = "local.env") -> "DiskDocumentStore":
        return cls(load_settings(env_file))

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def storage_root(self) -> Path:
        return self._settings.storage_root

    def path_for(self, key: Key) -> Path:
        return key_file(self._settings, _require_key(key))

    # reads

    def contains(self, key: Key) -> bool:
        file = self.path_for(key)
        with self._lock.shared():
            return file.is_file()

    def get(self, key: Key) -> tuple[Document, Etag]:
        file = self.path_for(key)
        with self._lock.shared():
            if not file.is_file():
                return Document.invalid(), Etag.invalid()
            data, st = read_bytes(file)
        return Document(data), Etag.from_stat(st)

    def enumerate(self, path: KeyPath, recursive: bool = True) -> "KeyEnumeration":
        """
        Keys stored under `path`, and below it when `recursive`.

        KeyPath("") enumerates from the root. A path with nothing under it
        yields nothing. Iterating again re-reads the filesystem. Order is
        unspecified. Each directory is listed under its own short read lock
        and keys are yielded outside the lock, so the store may be modified
        while iterating.
        """
        return KeyEnumeration(self, _require_path(path), recursive)

    def enumerate_values(self, path: KeyPath, recursive: bool = True) -> "ValueEnumeration":
        """
        (key, etag, document) for every key enumerate() would yield.

        Keys are listed in one read-locked pass; each document is then fetched
        under its own read lock, so concurrent writers can land in between.
        A key removed in that gap comes back with an invalid document and etag,
        exactly as get() would report it.
        """
        return ValueEnumeration(self, _require_path(path), recursive)

    # writes

    def set(self, key: Key, document: Document) -> Etag:
        file = self.path_for(key)
        payload = _require_document(document)
        with self._lock.exclusive():
            ensure_dir(file.parent)
            etag = self._write(file, payload)
        logger.debug("SET: %s (%d bytes)", key, len(payload))
        return etag

    def check_and_set(self, key: Key, document: Document, etag: Etag) -> tuple[bool, Etag]:
        file = self.path_for(key)
        payload = _require_document(document)
        if not isinstance(etag, Etag):
            raise TypeError(f"etag must be an Etag, got {type(etag).__name__}")

        with self._lock.exclusive():
            if not file.is_file():
                logger.debug("CHECK AND SET: %s is missing", key)
                return False, Etag.invalid()
            current = Etag.from_stat(file.stat())
            if current != etag:
                logger.debug("CHECK AND SET: etag mismatch for %s", key)
                return False, Etag.invalid()
            new_etag = self._write(file, payload)
        return True, new_etag

    def remove(self, key: Key) -> bool:
        file = self.path_for(key)
        with self._lock.exclusive():
            if not file.is_file():
                return False
            file.unlink()
            prune_empty_dirs(self._settings, key.path)
        logger.debug("REMOVE: %s", key)
        return True

    def destroy(self) -> bool:
        root = self._settings.storage_root
        with self._lock.exclusive():
            if not root.exists():
                return False
            shutil.rmtree(root)
        logger.info("STORE DESTROY: removed %s", root)
        return True

    # internals

    def _write(self, file: Path, payload: bytes) -> Etag:
        previous_ns = file.stat().st_mtime_ns if file.is_file() else None
        st = atomic_write_bytes(file, payload)
        if previous_ns is not None and st.st_mtime_ns <= previous_ns:
            st = advance_mtime(file, previous_ns)
        return Etag.from_stat(st)

    def _walk(
        self,
        path: KeyPath,
        recursive: bool,
        listing_lock: Callable[[], ContextManager[Any]],
    ) -> Iterator[Key]:
        # depth-first: a directory's files, then each subdirectory in turn
        pending = [key_path_dir(self._settings, path)]
        while pending:
            directory = pending.pop()
            with listing_lock():
                files, subdirs = _list_dir(directory)
            for file in files:
                key = key_from_file(self._settings, file)
                if key is None:
                    logger.debug("ENUMERATE: skipping foreign file %s", file)
                    continue
                yield key
            if recursive:
                pending.extend(reversed(subdirs))

    def _iter_keys(self, path: KeyPath, recursive: bool) -> Iterator[Key]:
        return self._walk(path, recursive, self._lock.shared)

    def _iter_values(self, path: KeyPath, recursive: bool) -> Iterator[tuple[Key, Etag, Document]]:
        with self._lock.shared():
            keys = list(self._walk(path, recursive, contextlib.nullcontext))
        for key in keys:
            document, etag = self.get(key)
            yield key, etag, document


class KeyEnumeration(Iterable[Key]):
    """Restartable view over the keys under one path."""

    def __init__(self, store: DiskDocumentStore, path: KeyPath, recursive: bool):
        self._store = store
        self.path = path
        self.recursive = recursive

    def __iter__(self) -> Iterator[Key]:
        return self._store._iter_keys(self.path, self.recursive)


class ValueEnumeration(Iterable[tuple[Key, Etag, Document]]):
    """Restartable view over (key, etag, document) under one path."""

    def __init__(self, store: DiskDocumentStore, path: KeyPath, recursive: bool):
        self._store = store
        self.path = path
        self.recursive = recursive

    def __iter__(self) -> Iterator[tuple[Key, Etag, Document]]:
        return self._store._iter_values(self.path, self.recursive)


def _list_dir(directory: Path) -> tuple[list[Path], list[Path]]:
    files: list[Path] = []
    subdirs: list[Path] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    if codec.is_encoded_name(entry.name):
                        subdirs.append(Path(entry.path))
                    else:
                        logger.debug("ENUMERATE: skipping foreign directory %s", entry.path)
                elif entry.is_file():
                    files.append(Path(entry.path))
    except (FileNotFoundError, NotADirectoryError):
        return [], []
    return files, subdirs


def _require_key(key: Any) -> Key:
    if key is None:
        raise InvalidKeyError("Key must not be None")
    if not isinstance(key, Key):
        raise InvalidKeyError(f"Expected a Key, got {type(key).__name__}")
    return key


def _require_path(path: Any) -> KeyPath:
    if path is None:
        raise InvalidKeyPathError("Key path must not be None")
    if not isinstance(path, KeyPath):
        raise InvalidKeyPathError(f"Expected a KeyPath, got {type(path).__name__}")
    return path


def _require_document(document: Any) -> bytes:
    if document is None:
        raise InvalidDocumentError("Document must not be None")
    if not isinstance(document, Document):
        raise InvalidDocumentError(f"Expected a Document, got {type(document).__name__}")
    if not document.is_valid:
        raise InvalidDocumentError("Cannot store an invalid document")
    return document.content
