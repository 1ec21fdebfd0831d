# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/flag_store.py
"""Store persistente a due chiavi booleane (marker vuoti in $SNAP_USER_DATA).

- `already_warned_plugs`: l'utente è già stato avvisato sulle plug opzionali.
- `plug_warnings_disabled`: tutte le plug richieste erano connesse; check disattivato per sempre.

Un marker presente vale True, assente vale False. I marker si creano soltanto,
non vengono mai rimossi da plugcheck.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .file_utils import check_file_flag, create_marker
from .logging_utils import get_structured_logger

ALREADY_WARNED = "already_warned_plugs"
WARNINGS_DISABLED = "plug_warnings_disabled"

KNOWN_FLAGS = frozenset({ALREADY_WARNED, WARNINGS_DISABLED})

_logger = get_structured_logger("plugcheck.flag_store")


class FlagStore:
    """Accesso ai due marker di stato dentro la data dir dell'utente."""

    def __init__(self, user_data_dir: Path | str, *, logger: Optional[logging.Logger] = None) -> None:
        self.user_data_dir = Path(user_data_dir)
        self._logger = logger or _logger

    def path_for(self, flag: str) -> Path:
        if flag not in KNOWN_FLAGS:
            raise ValueError(f"Flag sconosciuto: {flag!r}")
        return self.user_data_dir / flag

    def exists(self, flag: str) -> bool:
        """True se il marker esiste. Errori I/O diversi da "non trovato" → FlagAccessError."""
        return check_file_flag(self.path_for(flag))

    def create(self, flag: str) -> None:
        """Crea il marker (idempotente: un marker già presente è un successo)."""
        created = create_marker(self.path_for(flag))
        event = "flag_store.created" if created else "flag_store.already_present"
        self._logger.info(event, extra={"flag": flag})

    # ------------------------------------------------------------------ helpers

    def warnings_disabled(self) -> bool:
        return self.exists(WARNINGS_DISABLED)

    def already_warned(self) -> bool:
        return self.exists(ALREADY_WARNED)

    def mark_warned(self) -> None:
        self.create(ALREADY_WARNED)

    def disable_warnings(self) -> None:
        self.create(WARNINGS_DISABLED)


__all__ = [
    "ALREADY_WARNED",
    "WARNINGS_DISABLED",
    "KNOWN_FLAGS",
    "FlagStore",
]
