# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/state_engine.py
"""
Risoluzione dello stato di warning delle plug (un passaggio per lancio).

Flusso di `gather_state`:
1. `plug_warnings_disabled` presente → snapshot disabilitato; nessun load,
   nessuna query all'oracolo, nessuna scrittura.
2. Legge `already_warned_plugs`.
3. Carica plugs.yaml (vuoto se assente).
4. Già avvisato → opzionali azzerati, manifest mai consultato.
5. Altrimenti aggiunge le plug implicite di meta/snap.yaml come opzionali.
6. Interroga l'oracolo per ogni plug richiesta e la rimuove dagli opzionali.
7. Interroga l'oracolo per ogni opzionale rimasta.

Le iterazioni avvengono in ordine di nome. Ogni errore propaga: lo snapshot non
degrada mai a uno stato vuoto "senza warning".

`apply_write_back` persiste i due flag dopo la formattazione del messaggio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .declarations import PlugStatus, drop_required, load_declarations, merge_implicit
from .flag_store import FlagStore
from .logging_utils import get_structured_logger
from .manifest import collect_manifest_plugs
from .oracle import ConnectionOracle

_logger = get_structured_logger("plugcheck.state_engine")


def _frozen(mapping: Mapping[str, PlugStatus]) -> Mapping[str, PlugStatus]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class WarningSnapshot:
    """Risultato immutabile di una risoluzione.

    Se `warnings_disabled` è True gli altri campi vanno ignorati.
    Se `already_warned` è True `optional_plugs` è vuoto.
    """

    warnings_disabled: bool = False
    already_warned: bool = False
    required_plugs: Mapping[str, PlugStatus] = field(default_factory=lambda: _frozen({}))
    optional_plugs: Mapping[str, PlugStatus] = field(default_factory=lambda: _frozen({}))

    @classmethod
    def disabled(cls) -> "WarningSnapshot":
        return cls(warnings_disabled=True)

    @property
    def all_required_connected(self) -> bool:
        # vero anche senza plug richieste
        return all(plug.connected for plug in self.required_plugs.values())

    def missing_required(self) -> List[PlugStatus]:
        return [self.required_plugs[n] for n in sorted(self.required_plugs) if not self.required_plugs[n].connected]

    def missing_optional(self) -> List[PlugStatus]:
        return [self.optional_plugs[n] for n in sorted(self.optional_plugs) if not self.optional_plugs[n].connected]


def _query_all(
    plugs: Mapping[str, PlugStatus],
    oracle: ConnectionOracle,
) -> Dict[str, PlugStatus]:
    return {name: plugs[name].with_connection(oracle.is_connected(name)) for name in sorted(plugs)}


def gather_state(
    flags: FlagStore,
    snap_dir: Path | str,
    oracle: ConnectionOracle,
    *,
    logger: Optional[logging.Logger] = None,
) -> WarningSnapshot:
    """Costruisce lo snapshot leggendo flag, dichiarazioni, manifest e oracolo."""
    log = logger or _logger

    if flags.warnings_disabled():
        log.info("state.warnings_disabled")
        return WarningSnapshot.disabled()

    already_warned = flags.already_warned()
    decl = load_declarations(snap_dir, logger=log)

    if already_warned:
        optional: Dict[str, PlugStatus] = {}
    else:
        optional = merge_implicit(decl.required, decl.optional, collect_manifest_plugs(snap_dir, logger=log))

    required = _query_all(decl.required, oracle)
    optional = drop_required(optional, required)
    optional = _query_all(optional, oracle)

    snapshot = WarningSnapshot(
        warnings_disabled=False,
        already_warned=already_warned,
        required_plugs=_frozen(required),
        optional_plugs=_frozen(optional),
    )
    log.info(
        "state.resolved",
        extra={
            "already_warned": already_warned,
            "required_count": len(required),
            "optional_count": len(optional),
            "missing_required": len(snapshot.missing_required()),
            "missing_optional": len(snapshot.missing_optional()),
        },
    )
    return snapshot


def apply_write_back(
    flags: FlagStore,
    snapshot: WarningSnapshot,
    *,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Persiste i flag dopo che l'utente ha ricevuto il messaggio.

    - Primo avviso → `already_warned_plugs`, a prescindere dall'esito.
    - Tutte le richieste connesse (anche nessuna) → `plug_warnings_disabled`, per sempre.
    """
    log = logger or _logger
    if snapshot.warnings_disabled:
        return

    if not snapshot.already_warned:
        flags.mark_warned()

    if not snapshot.all_required_connected:
        log.info("state.warnings_kept", extra={"missing_required": len(snapshot.missing_required())})
        return

    flags.disable_warnings()
    log.info("state.warnings_disabled_now")


__all__ = ["WarningSnapshot", "gather_state", "apply_write_back"]
