# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/env_utils.py
from __future__ import annotations

"""Env utilities senza side-effects a import-time.

Espone:
- ``get_env_var(name, default=None, required=False, env=None)``: lettura sicura.
- ``get_bool(name, default=False, env=None)``: parsing booleano da ENV.

Tutte le funzioni accettano un ``env`` mapping opzionale: i test e l'orchestratore
possono passare un ambiente esplicito senza toccare ``os.environ``.
"""

import os
from collections.abc import Mapping
from typing import Optional

from .exceptions import EnvironmentMissing

__all__ = [
    "get_env_var",
    "get_bool",
]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def get_env_var(
    name: str,
    default: Optional[str] = None,
    *,
    required: bool = False,
    env: Mapping[str, str] | None = None,
) -> Optional[str]:
    """Ritorna il valore di una variabile d'ambiente.

    - Trimma spazi; se vuota, tratta come non impostata.
    - Se ``required`` e non presente (o vuota), solleva ``EnvironmentMissing``.
    """
    source: Mapping[str, str] = env if env is not None else os.environ
    val = source.get(name)
    if val is None or str(val).strip() == "":
        if required:
            raise EnvironmentMissing(name)
        return default
    return str(val).strip()


def get_bool(name: str, default: bool = False, *, env: Mapping[str, str] | None = None) -> bool:
    """Parsa un booleano da ENV (o mapping fornito) usando valori comuni truthy/falsy.

    Truthy: 1,true,yes,on (case-insensitive). Falsy: 0,false,no,off.
    Se non impostata o non riconosciuta, ritorna ``default``.
    """
    source: Mapping[str, str] = env if env is not None else os.environ
    val = source.get(name)
    if val is None:
        return bool(default)
    s = str(val).strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return bool(default)
