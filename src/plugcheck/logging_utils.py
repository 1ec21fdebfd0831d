# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/logging_utils.py
"""Logging strutturato per plugcheck.

Obiettivi:
- Logger **idempotente**, con filtro di **contesto** (snap) e formatter chiave-valore.
- Niente `print` nei moduli: tutti usano logging strutturato verso **stderr**;
  stdout resta all'applicazione avviata dopo il check.
- Messaggi = codici evento puntati (es. `flag_store.created`), dettagli in `extra`.

Formato di output:
    %(asctime)s %(levelname)s %(name)s: %(message)s | snap=<snap> [event=<evt> plug=<p> ...]

Indice funzioni principali (ruolo):
- `get_structured_logger(name, *, context=None, level=None, propagate=None)`:
    istanzia un logger con handler console (stderr risolto a ogni emit) e filtri.
- `phase_scope(logger, *, stage)`:
    context manager che emette phase_started / phase_completed / phase_failed.
- `tail_path(p, keep_segments=2)`:
    coda compatta di un path per log.

Linee guida implementative:
- **Idempotenza**: chiamate ripetute a `get_structured_logger` non creano handler duplicati.
- Livello di default da `PLUGCHECK_LOG_LEVEL` (fallback WARNING): un lancio normale
  non produce righe di log, solo l'eventuale messaggio di warning sulle plug.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from time import monotonic
from types import TracebackType
from typing import Any, Literal, Optional, Type, Union

from .env_constants import LOG_LEVEL_ENV, LOG_PROPAGATE_ENV
from .env_utils import get_bool, get_env_var

_DEFAULT_LEVEL = "WARNING"
_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def tail_path(p: Union[Path, str], keep_segments: int = 2) -> str:
    """Restituisce la coda del path per logging compatto (accetta `Path` o `str`)."""
    parts = list(Path(p).parts)
    return "/".join(parts[-keep_segments:]) if parts else str(p)


def resolve_level(level: int | str | None = None) -> int:
    """Normalizza un livello (int, nome o None → ENV/WARNING)."""
    if level is None:
        level = get_env_var(LOG_LEVEL_ENV, default=_DEFAULT_LEVEL) or _DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    resolved = getattr(logging, str(level).strip().upper(), None)
    return resolved if isinstance(resolved, int) else logging.WARNING


# ---------------------------------------------
# Structured logging
# ---------------------------------------------
@dataclass
class _CtxView:
    snap: Optional[str] = None


def _ctx_view_from(context: Any = None) -> _CtxView:
    """Estrae una vista minima del contesto per i filtri di logging."""
    cv = _CtxView()
    if context is not None:
        cv.snap = getattr(context, "snap_name", None)
    return cv


class _ContextFilter(logging.Filter):
    """Arricchisce ogni record con campi standardizzati."""

    def __init__(self, ctx: _CtxView):
        super().__init__()
        self.ctx = ctx

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "snap"):
            record.snap = self.ctx.snap or "-"
        return True


class _EventDefaultFilter(logging.Filter):
    """Garantisce che 'event' sia sempre presente; se manca usa il messaggio come codice evento."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover
        try:
            if not hasattr(record, "event"):
                msg = record.getMessage()
                record.event = msg.strip() if isinstance(msg, str) and msg.strip() else "log"
        except Exception:
            # mai bloccare il logging
            record.event = "log"
        return True


class _KVFormatter(logging.Formatter):
    """Formatter semplice e leggibile, con campi chiave-valore stabili."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        kv = []
        for k in (
            "snap",
            "event",
            "plug",
            "flag",
            "file_path",
            "phase",
            "duration_ms",
            "returncode",
            "error",
        ):
            v = getattr(record, k, None)
            if v is not None and v != "":
                kv.append(f"{k}={v}")
        if kv:
            return f"{base} | " + " ".join(kv)
        return base


class _StderrHandler(logging.StreamHandler):
    """Handler console che risolve `sys.stderr` a ogni emit (robusto a redirect/capture)."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        logging.Handler.__init__(self, level)

    @property
    def stream(self) -> Any:  # type: ignore[override]
        return sys.stderr


def _ensure_no_duplicate_handlers(lg: logging.Logger, key: str) -> None:
    """Evita handler duplicati (idempotenza)."""
    to_remove = [h for h in lg.handlers if getattr(h, "_logging_utils_key", None) == key]
    for h in to_remove:
        lg.removeHandler(h)


def _set_logger_filter(lg: logging.Logger, flt: logging.Filter, key: str) -> None:
    """Sostituisce (se presente) un filtro identificato dal key e lo rimpiazza."""
    to_remove = [f for f in lg.filters if getattr(f, "_logging_utils_key", None) == key]
    for f in to_remove:
        lg.removeFilter(f)
    flt._logging_utils_key = key  # type: ignore[attr-defined]
    lg.addFilter(flt)


def get_structured_logger(
    name: str,
    *,
    context: Any = None,
    level: int | str | None = None,
    propagate: Optional[bool] = None,
) -> logging.Logger:
    """Restituisce un logger configurato e idempotente.

    Parametri:
        name:      nome del logger (es. 'plugcheck.flag_store').
        context:   oggetto con attributo opzionale `.snap_name` (es. `RuntimeConfig`).
        level:     livello logging (default: `PLUGCHECK_LOG_LEVEL`, fallback WARNING).
        propagate: propagazione al root (default: `PLUGCHECK_LOG_PROPAGATE`, fallback False).

    Comportamento:
      - handler console su stderr sempre presente (uno solo per nome),
      - filtri: contesto + evento di default,
      - sotto pytest la propagazione è forzata a True (caplog è attaccato al root).
    """
    lvl = resolve_level(level)

    lg = logging.getLogger(name)
    lg.setLevel(lvl)
    if propagate is None:
        propagate = get_bool(LOG_PROPAGATE_ENV, default=False)
    if not propagate and (os.getenv("PYTEST_CURRENT_TEST") or "pytest" in sys.modules):
        propagate = True
    lg.propagate = propagate

    ctx_filter = _ContextFilter(_ctx_view_from(context))
    event_filter = _EventDefaultFilter()
    _set_logger_filter(lg, ctx_filter, f"{name}::ctx_filter")
    _set_logger_filter(lg, event_filter, f"{name}::event_filter")

    key_console = f"{name}::console"
    _ensure_no_duplicate_handlers(lg, key_console)
    ch = _StderrHandler(lvl)
    ch.setFormatter(_KVFormatter(_FMT))
    ch._logging_utils_key = key_console  # type: ignore[attr-defined]
    ch.addFilter(ctx_filter)
    ch.addFilter(event_filter)
    lg.addHandler(ch)
    return lg


# ---------------------------------------------
# Telemetria di fase
# ---------------------------------------------
class phase_scope:
    """Context manager per telemetria di fase con campi strutturati.

    Eventi emessi:
      - event=phase_started | phase_completed | phase_failed
      - Campi: phase, duration_ms, error (solo su fallimento).
    """

    def __init__(self, logger: logging.Logger, *, stage: str):
        self.logger = logger
        self.stage = stage
        self._t0: Optional[float] = None

    def __enter__(self) -> "phase_scope":
        self._t0 = monotonic()
        self.logger.debug("phase_started", extra={"event": "phase_started", "phase": self.stage})
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> Literal[False]:
        extra: dict[str, Any] = {"phase": self.stage}
        if self._t0 is not None:
            extra["duration_ms"] = int(round((monotonic() - self._t0) * 1000))
        if exc:
            extra["error"] = str(exc)
            self.logger.debug("phase_failed", extra={"event": "phase_failed", **extra})
            return False
        self.logger.debug("phase_completed", extra={"event": "phase_completed", **extra})
        return False


__all__ = [
    "get_structured_logger",
    "phase_scope",
    "resolve_level",
    "tail_path",
]
