from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .errors import InvalidDocumentError


@dataclass(frozen=True)
class Document:
    """
    Immutable document body.

    `Document()` is the invalid/absent sentinel returned for missing keys; it is
    distinct from the empty document `Document(b"")`.
    """

    data: bytes | None = None

    def __post_init__(self) -> None:
        data: Any = self.data
        if data is None or isinstance(data, bytes):
            return
        if isinstance(data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(data))
            return
        raise InvalidDocumentError(f"Document data must be bytes, got {type(data).__name__}")

    @classmethod
    def invalid(cls) -> "Document":
        return cls()

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "Document":
        if data is None:
            raise InvalidDocumentError("Document bytes must not be None")
        return cls(bytes(data))

    @classmethod
    def from_text(cls, text: str) -> "Document":
        if text is None:
            raise InvalidDocumentError("Document text must not be None")
        if not isinstance(text, str):
            raise InvalidDocumentError(f"Document text must be a string, got {type(text).__name__}")
        return cls(text.encode("utf-8"))

    @property
    def is_valid(self) -> bool:
        return self.data is not None

    @property
    def content(self) -> bytes:
        if self.data is None:
            raise InvalidDocumentError("Invalid document has no contents")
        return self.data

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def __repr__(self) -> str:
        if self.data is None:
            return "Document(<invalid>)"
        return f"Document({len(self.data)} bytes)"


@dataclass(frozen=True)
class Etag:
    """
    Version token for check-and-set, taken from a file's last write time.

    Wraps the modification time in integer nanoseconds; 0 is the invalid
    sentinel.
    """

    mtime_ns: int = 0

    @classmethod
    def invalid(cls) -> "Etag":
        return cls()

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "Etag":
        return cls(st.st_mtime_ns)

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Etag":
        if moment.tzinfo is None:
            moment = moment.astimezone()
        delta = moment - datetime(1970, 1, 1, tzinfo=timezone.utc)
        return cls((delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000)

    @property
    def is_valid(self) -> bool:
        return self.mtime_ns != 0

    @property
    def timestamp(self) -> datetime | None:
        if not self.is_valid:
            return None
        seconds, nanos = divmod(self.mtime_ns, 1_000_000_000)
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=nanos // 1_000)
