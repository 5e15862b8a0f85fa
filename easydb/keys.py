from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from . import codec
from .errors import InvalidKeyError, InvalidKeyPathError

SEPARATOR = "/"
_DOUBLE_SEPARATOR = SEPARATOR + SEPARATOR


def _check_separators(raw: str, error: type[InvalidKeyError], what: str) -> None:
    if raw.startswith(SEPARATOR):
        raise error(f"{what} must not start with a slash: {raw!r}")
    if raw.endswith(SEPARATOR):
        raise error(f"{what} must not end with a slash: {raw!r}")
    if _DOUBLE_SEPARATOR in raw:
        raise error(f"{what} must not contain a double slash: {raw!r}")


@dataclass(frozen=True)
class KeyPath:
    """
    Hierarchy prefix of a key, mapped to one directory under the storage root.

    "" is the root path. "a/b" maps to the directory "a<sep>b", with every
    segment percent-encoded on its own.
    """

    raw: str

    def __post_init__(self) -> None:
        raw: Any = self.raw
        if raw is None:
            raise InvalidKeyPathError("Key path must not be None")
        if not isinstance(raw, str):
            raise InvalidKeyPathError(f"Key path must be a string, got {type(raw).__name__}")
        if raw and not raw.strip():
            raise InvalidKeyPathError("Key path must not be blank")
        _check_separators(raw, InvalidKeyPathError, "Key path")

    @classmethod
    def root(cls) -> "KeyPath":
        return cls("")

    @property
    def is_root(self) -> bool:
        return not self.raw

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.raw.split(SEPARATOR)) if self.raw else ()

    @property
    def parent(self) -> "KeyPath":
        index = self.raw.rfind(SEPARATOR)
        return KeyPath(self.raw[:index] if index > 0 else "")

    def encoded_segments(self) -> tuple[str, ...]:
        return tuple(codec.encode(segment) for segment in self.segments)

    def relative_path(self) -> str:
        """Encoded segments joined with the host separator ("" for the root)."""
        segments = self.encoded_segments()
        return os.path.join(*segments) if segments else ""

    def child(self, name: str) -> "Key":
        return Key(f"{self.raw}{SEPARATOR}{name}" if self.raw else name)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Key:
    """
    Identifies one stored document.

    Keys may be hierarchical ("category/item"). They must not be blank, start
    or end with "/", or contain "//".
    """

    raw: str

    def __post_init__(self) -> None:
        raw: Any = self.raw
        if raw is None:
            raise InvalidKeyError("Key must not be None")
        if not isinstance(raw, str):
            raise InvalidKeyError(f"Key must be a string, got {type(raw).__name__}")
        if not raw.strip():
            raise InvalidKeyError("Key must not be empty or blank")
        _check_separators(raw, InvalidKeyError, "Key")

    @property
    def path(self) -> KeyPath:
        index = self.raw.rfind(SEPARATOR)
        return KeyPath(self.raw[:index] if index > 0 else "")

    @property
    def leaf(self) -> str:
        return self.raw[self.raw.rfind(SEPARATOR) + 1 :]

    def filename(self) -> str:
        """Encoded leaf name, without the data-file extension."""
        return codec.encode(self.leaf)

    def relative_path(self) -> str:
        return os.path.join(self.path.relative_path(), self.filename())

    def __str__(self) -> str:
        return self.raw
