from __future__ import annotations


class EasyDBError(Exception):
    """Base exception for all store failures."""


class InvalidKeyError(EasyDBError, ValueError):
    """Raised for keys that are null, blank, or badly separated."""


class InvalidKeyPathError(InvalidKeyError):
    """Raised for key paths that are null or badly separated."""


class InvalidDocumentError(EasyDBError, ValueError):
    """Raised when a write is given an absent or invalid document."""


class StoreConfigError(EasyDBError):
    """Raised for invalid store settings."""


class LockRecursionError(EasyDBError, RuntimeError):
    """Raised when a thread re-acquires the store lock it already holds."""
