# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/oracle.py
"""
Oracolo di connessione delle plug.

- `ConnectionOracle`: Protocol minimale (`is_connected(name) -> bool`) iniettato
  nell'engine; i test usano implementazioni in memoria.
- `SnapctlOracle`: adapter su `snapctl is-connected <plug>`.
  - exit 0 → connessa; exit != 0 → non connessa (esito normale);
  - impossibilità di eseguire il comando → `OracleQueryError`.

Nessun timeout: una query bloccata blocca il lancio (fail-closed).
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from time import monotonic
from typing import Optional, Protocol, Sequence, runtime_checkable

from .exceptions import OracleQueryError
from .logging_utils import get_structured_logger

DEFAULT_SNAPCTL = "snapctl"

_logger = get_structured_logger("plugcheck.oracle")


@runtime_checkable
class ConnectionOracle(Protocol):
    """Porta verso il meccanismo esterno che conosce lo stato delle plug."""

    def is_connected(self, name: str) -> bool: ...


class SnapctlOracle:
    """Interroga `snapctl is-connected` una volta per plug."""

    def __init__(self, command: str = DEFAULT_SNAPCTL, *, logger: Optional[logging.Logger] = None) -> None:
        self.command = command
        self._logger = logger or _logger

    def _argv(self, name: str) -> Sequence[str]:
        return [self.command, "is-connected", name]

    def is_connected(self, name: str) -> bool:
        argv = self._argv(name)
        start = monotonic()
        try:
            cp = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            self._logger.error(
                "oracle.query_failed",
                extra={"plug": name, "error": str(exc), "cmd": " ".join(shlex.quote(a) for a in argv)},
            )
            raise OracleQueryError(f"Impossibile eseguire {self.command}: {exc}", plug=name) from exc

        connected = cp.returncode == 0
        self._logger.debug(
            "oracle.query",
            extra={
                "plug": name,
                "returncode": cp.returncode,
                "connected": connected,
                "duration_ms": int(round((monotonic() - start) * 1000)),
            },
        )
        return connected


__all__ = ["ConnectionOracle", "SnapctlOracle", "DEFAULT_SNAPCTL"]
