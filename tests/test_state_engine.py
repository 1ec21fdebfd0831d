# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import pytest

from plugcheck import state_engine
from plugcheck.declarations import PlugStatus
from plugcheck.exceptions import ConfigError, FlagAccessError, InputFileMissing, OracleQueryError
from plugcheck.flag_store import ALREADY_WARNED, WARNINGS_DISABLED
from plugcheck.messages import MSG_OPTIONAL_PLUGS, MSG_REQUIRED_PLUGS, format_warning_message
from plugcheck.state_engine import WarningSnapshot, apply_write_back, gather_state
from tests._helpers.fake_oracle import FakeOracle


def _declare_net_and_home(snap):
    snap.write_declarations(
        {
            "net": {"required": True, "reason": "needed for sync"},
            "home": {"required": False, "reason": "save files"},
        }
    )
    snap.write_apps(demo=["net", "home"])


def _run(snap, oracle):
    snapshot = gather_state(snap.flags, snap.snap_dir, oracle)
    message = format_warning_message(snapshot)
    apply_write_back(snap.flags, snapshot)
    return snapshot, message


# ---------------------------------------------------------------------------
# Scenari end-to-end
# ---------------------------------------------------------------------------


def test_required_plug_disconnected_warns_and_keeps_checking(snap):
    _declare_net_and_home(snap)
    snapshot, message = _run(snap, FakeOracle({"net": False, "home": True}))

    assert MSG_REQUIRED_PLUGS in message
    assert "\tnet\t\t- needed for sync\n" in message
    assert MSG_OPTIONAL_PLUGS not in message
    assert "home" not in message
    assert snap.already_warned is True
    assert snap.warnings_disabled is False
    assert snapshot.required_plugs["net"].connected is False


def test_all_required_connected_disables_warnings(snap):
    _declare_net_and_home(snap)
    _, message = _run(snap, FakeOracle({"net": True, "home": True}))

    assert message == ""
    assert snap.warnings_disabled is True
    assert snap.already_warned is True


def test_disabled_marker_short_circuits_everything(snap, monkeypatch: pytest.MonkeyPatch):
    _declare_net_and_home(snap)
    snap.touch_flag(WARNINGS_DISABLED)

    def _fail(*_a, **_k):
        raise AssertionError("non deve essere chiamato")

    monkeypatch.setattr(state_engine, "load_declarations", _fail)
    monkeypatch.setattr(state_engine, "collect_manifest_plugs", _fail)
    oracle = FakeOracle({"net": False})

    snapshot, message = _run(snap, oracle)

    assert snapshot.warnings_disabled is True
    assert dict(snapshot.required_plugs) == {} and dict(snapshot.optional_plugs) == {}
    assert message == ""
    assert oracle.calls == []
    assert sorted(p.name for p in snap.user_data_dir.iterdir()) == [WARNINGS_DISABLED]


def test_implicit_manifest_plug_becomes_optional(snap):
    snap.write_apps(demo=["camera"])
    snapshot = gather_state(snap.flags, snap.snap_dir, FakeOracle())

    assert snapshot.optional_plugs["camera"] == PlugStatus("camera", required=False, reason="", connected=False)
    assert dict(snapshot.required_plugs) == {}


# ---------------------------------------------------------------------------
# Proprietà
# ---------------------------------------------------------------------------


def test_required_declaration_never_listed_as_optional(snap):
    snap.write_declarations({"net": {"required": True, "reason": "sync"}})
    snap.write_apps(demo=["net", "home"], daemon=["net"])
    oracle = FakeOracle()
    snapshot = gather_state(snap.flags, snap.snap_dir, oracle)

    assert set(snapshot.required_plugs) == {"net"}
    assert set(snapshot.optional_plugs) == {"home"}
    assert oracle.calls.count("net") == 1


def test_already_warned_skips_optional_and_manifest(snap, monkeypatch: pytest.MonkeyPatch):
    snap.write_declarations(
        {"net": {"required": True, "reason": "sync"}, "home": {"reason": "save files"}}
    )
    snap.touch_flag(ALREADY_WARNED)

    def _fail(*_a, **_k):
        raise AssertionError("manifest consultato")

    monkeypatch.setattr(state_engine, "collect_manifest_plugs", _fail)
    oracle = FakeOracle()
    snapshot, message = _run(snap, oracle)

    assert snapshot.already_warned is True
    assert dict(snapshot.optional_plugs) == {}
    assert oracle.calls == ["net"]
    assert MSG_OPTIONAL_PLUGS not in message
    assert MSG_REQUIRED_PLUGS in message


def test_no_required_plugs_disables_after_first_run(snap):
    snap.write_apps(demo=["camera"])
    _, message = _run(snap, FakeOracle())

    assert MSG_OPTIONAL_PLUGS in message
    assert "\tcamera\t\t- \n" in message
    assert snap.already_warned is True
    assert snap.warnings_disabled is True


def test_already_warned_created_even_without_missing_plugs(snap):
    snap.write_declarations({"net": {"required": True}})
    snap.write_apps(demo=["net"])
    _run(snap, FakeOracle({"net": False}))
    assert snap.already_warned is True
    assert snap.warnings_disabled is False


def test_disabled_is_permanent_even_if_plug_disconnects_later(snap):
    _declare_net_and_home(snap)
    _run(snap, FakeOracle({"net": True, "home": True}))
    assert snap.warnings_disabled is True

    later = FakeOracle({"net": False, "home": False})
    snapshot, message = _run(snap, later)
    assert snapshot.warnings_disabled is True
    assert message == ""
    assert later.calls == []


def test_second_run_does_not_repeat_optional_warning(snap):
    snap.write_declarations({"net": {"required": True, "reason": "sync"}})
    snap.write_apps(demo=["net", "camera"])
    oracle = FakeOracle()

    _, first = _run(snap, oracle)
    _, second = _run(snap, oracle)

    assert "camera" in first
    assert "camera" not in second
    assert "\tnet\t\t- sync\n" in second


def test_oracle_queried_in_name_order(snap):
    snap.write_declarations({"zeta": {"required": True}, "alpha": {"required": True}})
    snap.write_apps(demo=["mid", "beta"])
    oracle = FakeOracle()
    gather_state(snap.flags, snap.snap_dir, oracle)
    assert oracle.calls == ["alpha", "zeta", "beta", "mid"]


# ---------------------------------------------------------------------------
# Errori: propagano, nessuno stato di default
# ---------------------------------------------------------------------------


def test_oracle_failure_propagates_and_writes_nothing(snap):
    _declare_net_and_home(snap)
    with pytest.raises(OracleQueryError):
        gather_state(snap.flags, snap.snap_dir, FakeOracle(failing=["net"]))
    assert list(snap.user_data_dir.iterdir()) == []


def test_malformed_declarations_propagate(snap):
    snap.write_declarations("net: [1, 2]\n")
    snap.write_apps(demo=["net"])
    with pytest.raises(ConfigError):
        gather_state(snap.flags, snap.snap_dir, FakeOracle())


def test_missing_manifest_propagates_on_first_run(snap):
    with pytest.raises(InputFileMissing):
        gather_state(snap.flags, snap.snap_dir, FakeOracle())


def test_flag_io_error_propagates(tmp_path, snap):
    broken = tmp_path / "broken"
    broken.write_text("", encoding="utf-8")
    from plugcheck.flag_store import FlagStore

    with pytest.raises(FlagAccessError):
        gather_state(FlagStore(broken), snap.snap_dir, FakeOracle())


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def test_snapshot_helpers():
    snapshot = WarningSnapshot(
        required_plugs={
            "b": PlugStatus("b", True, connected=False),
            "a": PlugStatus("a", True, connected=False),
            "c": PlugStatus("c", True, connected=True),
        },
        optional_plugs={"x": PlugStatus("x", connected=True)},
    )
    assert [p.name for p in snapshot.missing_required()] == ["a", "b"]
    assert snapshot.missing_optional() == []
    assert snapshot.all_required_connected is False
    assert WarningSnapshot().all_required_connected is True


def test_snapshot_mappings_are_read_only(snap):
    snap.write_apps(demo=["camera"])
    snapshot = gather_state(snap.flags, snap.snap_dir, FakeOracle())
    with pytest.raises(TypeError):
        snapshot.optional_plugs["other"] = PlugStatus("other")  # type: ignore[index]
