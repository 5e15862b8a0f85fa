from __future__ import annotations

from pathlib import Path

import pytest

from easydb.errors import StoreConfigError
from easydb.settings import (
    DATA_FILE_EXTENSION_ENV,
    STORAGE_ROOT_ENV,
    StoreSettings,
    load_settings,
    make_settings,
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """
    Unset the store variables and restore them afterwards, even if a dotenv
    file sets them during the test.
    """
    for name in (STORAGE_ROOT_ENV, DATA_FILE_EXTENSION_ENV):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


def test_make_settings_defaults(tmp_path: Path):
    settings = make_settings(tmp_path / "db")
    assert settings.storage_root == (tmp_path / "db").resolve()
    assert settings.data_file_extension == ""


def test_relative_root_becomes_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    settings = make_settings("relative/db", ".txt")
    assert settings.storage_root.is_absolute()
    assert settings.storage_root == (tmp_path / "relative" / "db").resolve()


@pytest.mark.parametrize("root", ["", "   "])
def test_empty_root_is_rejected(root):
    with pytest.raises(StoreConfigError):
        make_settings(root)


@pytest.mark.parametrize("ext", [None, "a/b", 3])
def test_bad_extension_is_rejected(tmp_path: Path, ext):
    with pytest.raises(StoreConfigError):
        make_settings(tmp_path, ext)


@pytest.mark.parametrize(
    "fields",
    [
        {"storage_root": ""},
        {},
        {"storage_root": "db", "data_file_extension": "a/b"},
        {"storage_root": "db", "data_file_extension": None},
    ],
)
def test_direct_construction_raises_store_config_error(fields):
    with pytest.raises(StoreConfigError):
        StoreSettings(**fields)


def test_settings_are_frozen(tmp_path: Path):
    settings = make_settings(tmp_path)
    with pytest.raises(Exception):
        settings.data_file_extension = ".x"  # type: ignore[misc]


def test_load_settings_from_environment(clean_env, tmp_path: Path):
    clean_env.setenv(STORAGE_ROOT_ENV, str(tmp_path / "db"))
    clean_env.setenv(DATA_FILE_EXTENSION_ENV, ".json")

    settings = load_settings(env_file=None)
    assert settings.storage_root == (tmp_path / "db").resolve()
    assert settings.data_file_extension == ".json"


def test_load_settings_from_dotenv(clean_env, tmp_path: Path):
    env_file = tmp_path / "local.env"
    env_file.write_text(f"{STORAGE_ROOT_ENV}={tmp_path / 'from_file'}\n", encoding="utf-8")

    settings = load_settings(env_file=str(env_file))
    assert settings.storage_root == (tmp_path / "from_file").resolve()
    assert settings.data_file_extension == ""


def test_load_settings_requires_root(clean_env, tmp_path: Path):
    with pytest.raises(StoreConfigError):
        load_settings(env_file=str(tmp_path / "missing.env"))
