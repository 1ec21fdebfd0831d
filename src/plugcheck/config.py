# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/config.py
"""
Configurazione runtime di plugcheck (solo ENV, nessun file).

Campi gestiti:
- snap_dir: $SNAP, directory di installazione (obbligatoria)
- user_data_dir: $SNAP_USER_DATA, data dir scrivibile dell'utente (obbligatoria)
- snap_name: $SNAP_NAME, solo per il contesto dei log
- snapctl: $PLUGCHECK_SNAPCTL, comando dell'oracolo (default `snapctl`)
- log_level: $PLUGCHECK_LOG_LEVEL (default WARNING)

L'assenza di SNAP o SNAP_USER_DATA è fatale prima di qualsiasi altro lavoro.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .env_constants import LOG_LEVEL_ENV, SNAP_ENV, SNAP_NAME_ENV, SNAP_USER_DATA_ENV, SNAPCTL_ENV
from .env_utils import get_env_var
from .oracle import DEFAULT_SNAPCTL


@dataclass(frozen=True)
class RuntimeConfig:
    snap_dir: Path
    user_data_dir: Path
    snap_name: Optional[str] = None
    snapctl: str = DEFAULT_SNAPCTL
    log_level: str = "WARNING"


def load_runtime_config(env: Mapping[str, str] | None = None) -> RuntimeConfig:
    """Legge la configurazione dall'ambiente (o dal mapping fornito)."""
    snap_dir = get_env_var(SNAP_ENV, required=True, env=env)
    user_data_dir = get_env_var(SNAP_USER_DATA_ENV, required=True, env=env)
    return RuntimeConfig(
        snap_dir=Path(str(snap_dir)),
        user_data_dir=Path(str(user_data_dir)),
        snap_name=get_env_var(SNAP_NAME_ENV, env=env),
        snapctl=get_env_var(SNAPCTL_ENV, default=DEFAULT_SNAPCTL, env=env) or DEFAULT_SNAPCTL,
        log_level=(get_env_var(LOG_LEVEL_ENV, default="WARNING", env=env) or "WARNING").upper(),
    )


__all__ = ["RuntimeConfig", "load_runtime_config"]
