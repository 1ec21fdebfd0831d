# SPDX-License-Identifier: GPL-3.0-or-later
# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
for candidate in (REPO_ROOT, SRC_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from tests._helpers.fake_oracle import FakeOracle  # noqa: E402
from tests._helpers.snap_layout import SnapLayout  # noqa: E402


@pytest.fixture
def snap(tmp_path: Path) -> SnapLayout:
    """Layout snap vuoto: nessun plugs.yaml, nessun manifest, nessun marker."""
    snap_dir = tmp_path / "snap" / "demo" / "x1"
    user_data_dir = tmp_path / "home" / "snap" / "demo" / "x1"
    snap_dir.mkdir(parents=True)
    user_data_dir.mkdir(parents=True)
    return SnapLayout(snap_dir=snap_dir, user_data_dir=user_data_dir)


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture(autouse=True)
def _clean_plugcheck_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isola i test dalle variabili snap eventualmente presenti nella shell."""
    for name in (
        "SNAP",
        "SNAP_USER_DATA",
        "SNAP_NAME",
        "PLUGCHECK_SNAPCTL",
        "PLUGCHECK_LOG_LEVEL",
        "PLUGCHECK_LOG_PROPAGATE",
    ):
        monkeypatch.delenv(name, raising=False)
