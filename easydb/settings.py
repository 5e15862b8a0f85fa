from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import StoreConfigError

STORAGE_ROOT_ENV = "EASYDB_STORAGE_ROOT"
DATA_FILE_EXTENSION_ENV = "EASYDB_DATA_FILE_EXTENSION"


class StoreSettings(BaseModel):
    """
    Store settings.

    - storage_root: directory holding every data file (required, made absolute).
    - data_file_extension: appended to each leaf file name, e.g. ".txt".
      May be empty, never None.
    """

    model_config = ConfigDict(frozen=True)

    storage_root: Path
    data_file_extension: str = ""

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise StoreConfigError(f"Invalid store settings: {e}") from e

    @field_validator("storage_root", mode="before")
    @classmethod
    def _absolute_root(cls, value: object) -> object:
        if isinstance(value, str):
            if not value.strip():
                raise ValueError("storage_root must not be empty")
            value = Path(value)
        if isinstance(value, Path):
            return value.expanduser().resolve()
        return value

    @field_validator("data_file_extension")
    @classmethod
    def _plain_extension(cls, value: str) -> str:
        if "/" in value or os.sep in value:
            raise ValueError("data_file_extension must not contain a path separator")
        return value


def make_settings(storage_root: str | Path, data_file_extension: str = "") -> StoreSettings:
    return StoreSettings(storage_root=storage_root, data_file_extension=data_file_extension)


def load_settings(env_file: str | None = "local.env") -> StoreSettings:
    """
    Build settings from the environment, after loading `env_file` if it exists.

    EASYDB_STORAGE_ROOT is required; EASYDB_DATA_FILE_EXTENSION defaults to "".
    """
    if env_file:
        load_dotenv(env_file)

    storage_root = os.getenv(STORAGE_ROOT_ENV, "").strip()
    if not storage_root:
        raise StoreConfigError(f"{STORAGE_ROOT_ENV} is required")
    data_file_extension = os.getenv(DATA_FILE_EXTENSION_ENV, "")

    return make_settings(storage_root, data_file_extension)
