from __future__ import annotations

import re
from typing import overload
from urllib.parse import quote_plus, unquote_plus, unquote_to_bytes

# quote() never escapes "." or "~", but neither is safe for file names here.
_ALWAYS_SAFE_EXTRAS = {".": "%2E", "~": "%7E"}

_ENCODED_NAME = re.compile(r"[A-Za-z0-9_\-%+]+")


@overload
def encode(value: str) -> str: ...


@overload
def encode(value: bytes) -> bytes: ...


def encode(value: str | bytes) -> str | bytes:
    """
    Percent-encode everything outside [A-Za-z0-9_-].

    Spaces become "+", every other unsafe byte becomes "%XX" (uppercase hex).
    Text is encoded byte-wise over its UTF-8 form.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _encode_text(quote_plus(bytes(value), safe="")).encode("ascii")
    return _encode_text(quote_plus(value, safe="", encoding="utf-8"))


def _encode_text(quoted: str) -> str:
    for ch, escaped in _ALWAYS_SAFE_EXTRAS.items():
        quoted = quoted.replace(ch, escaped)
    return quoted


@overload
def decode(value: str) -> str: ...


@overload
def decode(value: bytes) -> bytes: ...


def decode(value: str | bytes) -> str | bytes:
    """
    Reverse of encode().

    "+" becomes a space, "%XX" (any hex case) becomes that byte, and anything
    else, including a "%" without two hex digits after it, is kept as is.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return unquote_to_bytes(bytes(value).replace(b"+", b" "))
    return unquote_plus(value, encoding="utf-8", errors="replace")


def is_encoded_name(name: str) -> bool:
    """True if `name` could have been produced by encode()."""
    return bool(name) and _ENCODED_NAME.fullmatch(name) is not None
