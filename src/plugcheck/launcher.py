# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/launcher.py
"""Avvio del comando applicativo con stdio ereditati e propagazione dell'exit code.

Durante l'attesa il wrapper ignora SIGINT: il Ctrl+C del terminale arriva al
figlio (stesso process group), che decide da solo se e come terminare.
"""

from __future__ import annotations

import logging
import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from .exceptions import LaunchError
from .logging_utils import get_structured_logger

_logger = get_structured_logger("plugcheck.launcher")


def exit_status_from_returncode(returncode: int) -> int:
    """Converte il returncode di subprocess in exit status di shell.

    Un figlio terminato dal segnale N (returncode -N) diventa 128 + N.
    """
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    """Ignora SIGINT nel blocco e ripristina l'handler precedente all'uscita."""
    # signal.signal è consentito solo nel main thread
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def launch(argv: Sequence[str], *, logger: Optional[logging.Logger] = None) -> int:
    """Esegue `argv[0]` con `argv[1:]` e ritorna l'exit status del figlio.

    Raises:
        LaunchError: se il comando è vuoto o il processo non può essere avviato.
    """
    log = logger or _logger
    if not argv:
        raise LaunchError("Nessun comando da avviare")

    # Popen prima di ignorare SIGINT: un SIG_IGN verrebbe ereditato dal figlio.
    try:
        proc = subprocess.Popen(list(argv))
    except OSError as exc:
        log.debug("launcher.start_failed", extra={"error": str(exc)})
        raise LaunchError(f"Impossibile avviare il comando: {exc}", file_path=argv[0]) from exc

    with _sigint_ignored():
        returncode = proc.wait()

    log.debug("launcher.exited", extra={"returncode": returncode})
    return exit_status_from_returncode(returncode)


__all__ = ["launch", "exit_status_from_returncode"]
