#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/cli/check_launch.py
"""
Orchestratore check-and-launch per le app snap.

Uso:
    plugcheck [comando [argomenti...]]

Responsabilità:
- Leggere SNAP / SNAP_USER_DATA (fatale se assenti, prima di ogni altro lavoro).
- Risolvere lo stato delle plug, scrivere l'eventuale warning su stderr e
  aggiornare i flag persistenti.
- Avviare il comando con stdio ereditati e propagarne l'exit code.

Note architetturali:
- Gli argomenti NON vengono interpretati: sono inoltrati verbatim al comando.
- Un errore nella fase di check viene riportato su stderr e interrompe il lancio.
- Un comando che non parte esce con 1 senza messaggi (stdio già del figlio).
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping
from typing import NoReturn, Optional, Sequence, TextIO

from plugcheck.cli_runner import run_cli_orchestrator
from plugcheck.config import RuntimeConfig, load_runtime_config
from plugcheck.exceptions import EnvironmentMissing, LaunchError, PlugCheckError
from plugcheck.flag_store import FlagStore
from plugcheck.launcher import launch
from plugcheck.logging_utils import get_structured_logger, phase_scope
from plugcheck.messages import format_warning_message
from plugcheck.oracle import ConnectionOracle, SnapctlOracle
from plugcheck.state_engine import WarningSnapshot, apply_write_back, gather_state

ENTRY_NAME = "plugcheck"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Nessun parsing di opzioni: tutto ciò che segue il programma è il comando da avviare."""
    args = list(sys.argv[1:] if argv is None else argv)
    return argparse.Namespace(command=args)


def run_check(
    config: RuntimeConfig,
    *,
    oracle: Optional[ConnectionOracle] = None,
    logger: Optional[logging.Logger] = None,
    stderr: Optional[TextIO] = None,
) -> WarningSnapshot:
    """Fase di check: snapshot → messaggio su stderr → write-back dei flag."""
    log = logger or get_structured_logger("plugcheck.cli", context=config, level=config.log_level)
    stream = stderr or sys.stderr
    flags = FlagStore(config.user_data_dir, logger=log)
    oracle = oracle or SnapctlOracle(config.snapctl, logger=log)

    with phase_scope(log, stage="plug_check"):
        snapshot = gather_state(flags, config.snap_dir, oracle, logger=log)
        message = format_warning_message(snapshot)
        if message:
            stream.write(message)
            stream.flush()
        apply_write_back(flags, snapshot, logger=log)
    return snapshot


def run(
    args: argparse.Namespace,
    *,
    env: Mapping[str, str] | None = None,
    oracle: Optional[ConnectionOracle] = None,
) -> int:
    """Esegue check e lancio; ritorna l'exit code da propagare."""
    try:
        config = load_runtime_config(env)
    except EnvironmentMissing as exc:
        get_structured_logger("plugcheck.cli").error("cli.environment_missing", extra={"error": str(exc)})
        raise

    log = get_structured_logger("plugcheck.cli", context=config, level=config.log_level)
    try:
        run_check(config, oracle=oracle, logger=log)
    except PlugCheckError as exc:
        log.error("cli.check_failed", extra={"error": str(exc)})
        raise

    command = list(getattr(args, "command", None) or [])
    if not command:
        return 0
    try:
        return launch(command, logger=log)
    except LaunchError:
        return 1


def main() -> NoReturn:
    run_cli_orchestrator(ENTRY_NAME, _parse_args, run)


if __name__ == "__main__":
    main()
