# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/messages.py
"""Testo di warning mostrato su stderr prima del lancio (funzione pura)."""

from __future__ import annotations

from typing import Iterable

from .declarations import PlugStatus
from .state_engine import WarningSnapshot

MSG_OPTIONAL_PLUGS = "Consider connecting the following interfaces:"
MSG_REQUIRED_PLUGS = "The following interfaces must be connected for app to work properly:"


def format_plug_line(plug: PlugStatus) -> str:
    return f"\t{plug.name}\t\t- {plug.reason}\n"


def _section(header: str, plugs: Iterable[PlugStatus]) -> str:
    lines = "".join(format_plug_line(p) for p in plugs)
    return f"{header}\n{lines}" if lines else ""


def format_warning_message(snapshot: WarningSnapshot) -> str:
    """Costruisce il messaggio; stringa vuota se non c'è nulla da segnalare."""
    if snapshot.warnings_disabled:
        return ""

    msg = ""
    if not snapshot.already_warned:
        msg = _section(MSG_OPTIONAL_PLUGS, snapshot.missing_optional())

    required = _section(MSG_REQUIRED_PLUGS, snapshot.missing_required())
    if required:
        msg = f"{msg}\n{required}" if msg else required

    if msg:
        msg += "\n\n"
    return msg


__all__ = [
    "MSG_OPTIONAL_PLUGS",
    "MSG_REQUIRED_PLUGS",
    "format_plug_line",
    "format_warning_message",
]
