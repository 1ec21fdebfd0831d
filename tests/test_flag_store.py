# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from plugcheck.exceptions import FlagAccessError
from plugcheck.flag_store import ALREADY_WARNED, WARNINGS_DISABLED, FlagStore


def test_missing_marker_is_false(tmp_path: Path):
    store = FlagStore(tmp_path)
    assert store.exists(ALREADY_WARNED) is False
    assert store.warnings_disabled() is False


def test_missing_data_dir_is_false(tmp_path: Path):
    store = FlagStore(tmp_path / "not-yet-created")
    assert store.already_warned() is False


def test_create_writes_empty_marker(tmp_path: Path):
    store = FlagStore(tmp_path)
    store.create(WARNINGS_DISABLED)
    marker = tmp_path / WARNINGS_DISABLED
    assert marker.is_file()
    assert marker.read_bytes() == b""
    assert store.exists(WARNINGS_DISABLED) is True


def test_create_is_idempotent(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.INFO, logger="plugcheck.flag_store")
    store = FlagStore(tmp_path)
    store.mark_warned()
    store.mark_warned()
    assert store.already_warned() is True
    messages = [rec.getMessage() for rec in caplog.records]
    assert "flag_store.created" in messages
    assert "flag_store.already_present" in messages


def test_create_keeps_existing_content(tmp_path: Path):
    marker = tmp_path / ALREADY_WARNED
    marker.write_text("legacy", encoding="utf-8")
    FlagStore(tmp_path).create(ALREADY_WARNED)
    assert marker.read_text(encoding="utf-8") == "legacy"


def test_create_makes_missing_data_dir(tmp_path: Path):
    store = FlagStore(tmp_path / "a" / "b")
    store.disable_warnings()
    assert (tmp_path / "a" / "b" / WARNINGS_DISABLED).is_file()


def test_unknown_flag_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        FlagStore(tmp_path).exists("something_else")


def test_unexpected_io_on_exists_raises(tmp_path: Path):
    not_a_dir = tmp_path / "data"
    not_a_dir.write_text("", encoding="utf-8")
    with pytest.raises(FlagAccessError):
        FlagStore(not_a_dir).exists(ALREADY_WARNED)


def test_unexpected_io_on_create_raises(tmp_path: Path):
    not_a_dir = tmp_path / "data"
    not_a_dir.write_text("", encoding="utf-8")
    with pytest.raises(FlagAccessError) as exc:
        FlagStore(not_a_dir).create(WARNINGS_DISABLED)
    assert exc.value.file_path is not None
