# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/file_utils.py
"""
File utilities: test di esistenza e creazione esclusiva di marker.

Obiettivi:
- Distinguere "non trovato" (esito normale → False) da errori I/O inattesi
  (permessi, disco, ...) che diventano `FlagAccessError`.
- Creare marker vuoti con `O_CREAT | O_EXCL`: la creazione è atomica e un marker
  già presente è un successo (nessuna finestra exists-then-create).

Indice (ruolo funzioni):
- `check_file_flag(path)`: True se il file esiste, False se assente.
- `create_marker(path, *, mode=0o644)`: crea un file vuoto; ritorna False se esisteva già.
"""

from __future__ import annotations

import os
from pathlib import Path

from .exceptions import FlagAccessError


def check_file_flag(path: Path | str) -> bool:
    """Ritorna True se `path` esiste; "non trovato" è un False legittimo."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise FlagAccessError(f"Impossibile verificare il file: {exc}", file_path=str(path)) from exc
    return True


def create_marker(path: Path | str, *, mode: int = 0o644) -> bool:
    """Crea un marker vuoto in modo esclusivo.

    Ritorna True se il marker è stato creato in questa chiamata, False se esisteva già.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FlagAccessError(
            f"Impossibile creare la directory padre del marker: {exc}", file_path=str(path)
        ) from exc

    try:
        fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, mode)
    except FileExistsError:
        return False
    except OSError as exc:
        raise FlagAccessError(f"Impossibile creare il marker: {exc}", file_path=str(path)) from exc
    os.close(fd)
    return True


__all__ = ["check_file_flag", "create_marker"]
