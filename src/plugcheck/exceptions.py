# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/exceptions.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

"""
Eccezioni SSoT per plugcheck.

Ruoli principali:
- `PlugCheckError`: base per tutti gli errori bloccanti della fase di check e del lancio.
- Sottoclassi tipizzate: ConfigError (dichiarazioni/manifest malformati),
  EnvironmentMissing, InputFileMissing, FlagAccessError, OracleQueryError, LaunchError.
- `EXIT_CODES` + `exit_code_for`: tabella centralizzata per l'orchestratore CLI.

Linee guida:
- Nessuna eccezione fa I/O o termina il processo.
- I messaggi includono contesto "safe" in __str__ (nome file, nome plug).
- "File non trovato" per i marker e per plugs.yaml NON è un errore: non usare
  queste eccezioni per quei casi.
"""

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class PlugCheckError(Exception):
    """Eccezione generica per errori bloccanti del check delle plug.

    Accetta un messaggio e un payload contestuale opzionale (file_path, plug)
    utile per logging strutturato e diagnosi.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        file_path: Optional[str | Path] = None,
        plug: Optional[str] = None,
        **_: Any,
    ) -> None:
        super().__init__(message or "")
        self.file_path: Optional[str | Path] = file_path
        self.plug: Optional[str] = plug

    @staticmethod
    def _safe_file_repr(fp: str | Path) -> str:
        """Mostra solo il nome (niente path assoluti)."""
        try:
            return Path(fp).name or str(fp)
        except Exception:
            return str(fp)

    def __str__(self) -> str:
        base_msg = super().__str__() or self.__class__.__name__
        context_parts: list[str] = []
        if self.file_path:
            context_parts.append(f"file={self._safe_file_repr(self.file_path)}")
        if self.plug:
            context_parts.append(f"plug={self.plug}")
        context_info = f" [{' | '.join(context_parts)}]" if context_parts else ""
        return f"{base_msg}{context_info}"


# ---------------------------------------------------------------------------
# Errori tipizzati
# ---------------------------------------------------------------------------


class ConfigError(PlugCheckError):
    """Errore di caricamento o validazione di plugs.yaml / meta/snap.yaml."""

    pass


class EnvironmentMissing(ConfigError):
    """Variabile d'ambiente obbligatoria (SNAP, SNAP_USER_DATA) assente o vuota."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variabile d'ambiente obbligatoria non impostata: {name}")
        self.name = name


class InputFileMissing(PlugCheckError):
    """File di input atteso ma assente (es. meta/snap.yaml)."""

    pass


class FlagAccessError(PlugCheckError):
    """Errore I/O inatteso su marker o file di input (permessi, disco, ...)."""

    pass


class OracleQueryError(PlugCheckError):
    """Il meccanismo di interrogazione dello stato plug è fallito.

    Distinto da "plug non connessa", che è un normale esito negativo.
    """

    pass


class LaunchError(PlugCheckError):
    """Il processo figlio non può essere avviato."""

    pass


# ---------------------------------------------------------------------------
# Exit codes centralizzati (nessun side-effect)
# ---------------------------------------------------------------------------

EXIT_CODES = {
    "PlugCheckError": 1,
    "EnvironmentMissing": 1,
    "LaunchError": 1,
    "ConfigError": 2,
    "InputFileMissing": 3,
    "FlagAccessError": 4,
    "OracleQueryError": 5,
}


def exit_code_for(exc: BaseException) -> int:
    """Restituisce il codice di uscita per un'eccezione (fallback a PlugCheckError=1)."""
    return EXIT_CODES.get(type(exc).__name__, EXIT_CODES["PlugCheckError"])


__all__ = [
    "PlugCheckError",
    "ConfigError",
    "EnvironmentMissing",
    "InputFileMissing",
    "FlagAccessError",
    "OracleQueryError",
    "LaunchError",
    "EXIT_CODES",
    "exit_code_for",
]
