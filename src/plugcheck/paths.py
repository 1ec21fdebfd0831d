# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/paths.py
"""Path fissi dentro $SNAP / $SNAP_USER_DATA e guardia di perimetro."""

from __future__ import annotations

from pathlib import Path

from .exceptions import ConfigError

PLUG_DESCRIPTIONS = "plugs.yaml"
SNAP_MANIFEST = Path("meta") / "snap.yaml"


def ensure_within_and_resolve(base: Path | str, candidate: Path | str) -> Path:
    """Risolve `candidate` verificando che resti sotto `base` (fail-closed).

    Un symlink che porta fuori dall'installazione è trattato come configurazione invalida.
    """
    try:
        base_resolved = Path(base).resolve()
        candidate_resolved = Path(candidate).resolve()
    except (OSError, RuntimeError) as exc:
        raise ConfigError(f"Impossibile risolvere i path: {exc}", file_path=str(candidate)) from exc
    try:
        candidate_resolved.relative_to(base_resolved)
    except ValueError as exc:
        raise ConfigError(
            f"Path non consentito: {candidate_resolved} non è sotto {base_resolved}",
            file_path=str(candidate),
        ) from exc
    return candidate_resolved


def declarations_path(snap_dir: Path | str) -> Path:
    return Path(snap_dir) / PLUG_DESCRIPTIONS


def manifest_path(snap_dir: Path | str) -> Path:
    return Path(snap_dir) / SNAP_MANIFEST


__all__ = [
    "PLUG_DESCRIPTIONS",
    "SNAP_MANIFEST",
    "ensure_within_and_resolve",
    "declarations_path",
    "manifest_path",
]
