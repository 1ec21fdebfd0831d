# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/env_constants.py
"""SSoT per i nomi delle variabili d'ambiente lette da plugcheck."""

SNAP_ENV = "SNAP"
SNAP_USER_DATA_ENV = "SNAP_USER_DATA"
SNAP_NAME_ENV = "SNAP_NAME"
SNAPCTL_ENV = "PLUGCHECK_SNAPCTL"
LOG_LEVEL_ENV = "PLUGCHECK_LOG_LEVEL"
LOG_PROPAGATE_ENV = "PLUGCHECK_LOG_PROPAGATE"

__all__ = [
    "SNAP_ENV",
    "SNAP_USER_DATA_ENV",
    "SNAP_NAME_ENV",
    "SNAPCTL_ENV",
    "LOG_LEVEL_ENV",
    "LOG_PROPAGATE_ENV",
]
