# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/declarations.py
"""
Dichiarazioni esplicite delle plug ($SNAP/plugs.yaml) e helper di merge.

Formato di plugs.yaml:

    network:
      required: true
      reason: "needed for sync"
    home:
      reason: "save files"

Regole:
- File assente → nessuna dichiarazione (non è un errore).
- Entry nulla → `required=False`, `reason=""`. Chiavi sconosciute ignorate.
- Precedenza: esplicito > implicito, richiesto > opzionale. I merge sono funzioni
  pure che restituiscono nuovi mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .exceptions import ConfigError
from .file_utils import check_file_flag
from .logging_utils import get_structured_logger, tail_path
from .paths import declarations_path
from .yaml_utils import yaml_read

_logger = get_structured_logger("plugcheck.declarations")


@dataclass(frozen=True)
class PlugStatus:
    """Stato di una plug dichiarata; `connected` è None finché l'oracolo non risponde."""

    name: str
    required: bool = False
    reason: str = ""
    connected: Optional[bool] = None

    def with_connection(self, connected: bool) -> "PlugStatus":
        return replace(self, connected=bool(connected))


@dataclass(frozen=True)
class Declarations:
    required: Mapping[str, PlugStatus] = field(default_factory=dict)
    optional: Mapping[str, PlugStatus] = field(default_factory=dict)


def _parse_entry(name: Any, raw: Any, *, file_path: Path) -> PlugStatus:
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"Nome plug non valido: {name!r}", file_path=str(file_path))
    if raw is None:
        return PlugStatus(name=name)
    if not isinstance(raw, Mapping):
        raise ConfigError("La dichiarazione deve essere un mapping", file_path=str(file_path), plug=name)

    required = raw.get("required", False)
    if required is None:
        required = False
    if not isinstance(required, bool):
        raise ConfigError(
            f"Campo 'required' non booleano: {required!r}", file_path=str(file_path), plug=name
        )
    reason = raw.get("reason", "")
    if reason is None:
        reason = ""
    if not isinstance(reason, str):
        raise ConfigError(f"Campo 'reason' non testuale: {reason!r}", file_path=str(file_path), plug=name)
    return PlugStatus(name=name, required=required, reason=reason)


def parse_declarations(payload: Any, *, file_path: Path) -> Declarations:
    """Valida il contenuto di plugs.yaml e lo partiziona in richieste/opzionali."""
    if payload is None:
        return Declarations()
    if not isinstance(payload, Mapping):
        raise ConfigError("plugs.yaml deve contenere un mapping nome → dichiarazione", file_path=str(file_path))

    required: Dict[str, PlugStatus] = {}
    optional: Dict[str, PlugStatus] = {}
    for name, raw in payload.items():
        plug = _parse_entry(name, raw, file_path=file_path)
        if plug.required:
            required[plug.name] = plug
        else:
            optional[plug.name] = plug
    return Declarations(required=required, optional=optional)


def load_declarations(snap_dir: Path | str, *, logger: Optional[logging.Logger] = None) -> Declarations:
    """Carica $SNAP/plugs.yaml se presente; in assenza ritorna dichiarazioni vuote."""
    log = logger or _logger
    path = declarations_path(snap_dir)
    if not check_file_flag(path):
        log.debug("declarations.absent", extra={"file_path": tail_path(path)})
        return Declarations()

    decl = parse_declarations(yaml_read(snap_dir, path), file_path=path)
    log.info(
        "declarations.loaded",
        extra={
            "file_path": tail_path(path),
            "required_count": len(decl.required),
            "optional_count": len(decl.optional),
        },
    )
    return decl


# ---------------------------------------------------------------------------
# Merge helpers (puri)
# ---------------------------------------------------------------------------


def merge_implicit(
    declared_required: Mapping[str, PlugStatus],
    declared_optional: Mapping[str, PlugStatus],
    implicit_names: Iterable[str],
) -> Dict[str, PlugStatus]:
    """Aggiunge come opzionali (senza reason) le plug implicite non già dichiarate.

    Le dichiarazioni esistenti non vengono mai sovrascritte.
    """
    merged: Dict[str, PlugStatus] = dict(declared_optional)
    for name in implicit_names:
        if name in declared_required or name in merged:
            continue
        merged[name] = PlugStatus(name=name, required=False, reason="")
    return merged


def drop_required(
    optional: Mapping[str, PlugStatus],
    required: Mapping[str, PlugStatus],
) -> Dict[str, PlugStatus]:
    """Rimuove dagli opzionali ogni nome già presente tra le richieste."""
    return {name: plug for name, plug in optional.items() if name not in required}


__all__ = [
    "PlugStatus",
    "Declarations",
    "parse_declarations",
    "load_declarations",
    "merge_implicit",
    "drop_required",
]
