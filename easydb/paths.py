from __future__ import annotations

import logging
from pathlib import Path

from . import codec
from .errors import InvalidKeyError
from .keys import SEPARATOR, Key, KeyPath
from .settings import StoreSettings

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def key_path_dir(settings: StoreSettings, path: KeyPath) -> Path:
    """Directory holding the keys under `path` (the storage root for "")."""
    return settings.storage_root.joinpath(*path.encoded_segments())


def key_file(settings: StoreSettings, key: Key) -> Path:
    """Data file for `key`; the extension goes on the leaf name only."""
    return key_path_dir(settings, key.path) / (key.filename() + settings.data_file_extension)


def key_from_file(settings: StoreSettings, file: Path) -> Key | None:
    """
    Map a data file back to its key.

    Returns None for anything that is not one of our data files: a name
    without the data-file extension, or a name the encoder could not have
    produced (e.g. a leftover temp file).
    """
    try:
        relative = file.relative_to(settings.storage_root)
    except ValueError:
        return None

    parts = list(relative.parts)
    if not parts or not is_data_file_name(settings, parts[-1]):
        return None
    if not all(codec.is_encoded_name(p) for p in parts[:-1]):
        return None

    ext = settings.data_file_extension
    if ext:
        parts[-1] = parts[-1][: -len(ext)]
    try:
        return Key(SEPARATOR.join(codec.decode(p) for p in parts))
    except InvalidKeyError:
        logger.debug("KEY DECODE: %s does not decode to a valid key", file)
        return None


def is_data_file_name(settings: StoreSettings, name: str) -> bool:
    ext = settings.data_file_extension
    if ext:
        if not name.endswith(ext):
            return False
        name = name[: -len(ext)]
    return codec.is_encoded_name(name)


def prune_empty_dirs(settings: StoreSettings, path: KeyPath) -> list[Path]:
    """
    Remove now-empty directories from `path` up toward the storage root.

    Walks from the deepest directory upward and stops at the first directory
    that is missing or not empty. The storage root itself is never removed.
    Returns the directories that were removed, deepest first.
    """
    removed: list[Path] = []
    segments = list(path.encoded_segments())
    while segments:
        directory = settings.storage_root.joinpath(*segments)
        if not directory.is_dir() or any(directory.iterdir()):
            break
        directory.rmdir()
        removed.append(directory)
        logger.debug("PRUNE: removed empty directory %s", directory)
        segments.pop()
    return removed
