# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/manifest.py
"""Raccolta delle plug referenziate dalle app di $SNAP/meta/snap.yaml.

Legge solo la sezione `apps.<app>.plugs`; il resto del manifest è ignorato.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .exceptions import ConfigError
from .logging_utils import get_structured_logger, tail_path
from .paths import manifest_path
from .yaml_utils import yaml_read

_logger = get_structured_logger("plugcheck.manifest")


def parse_manifest_plugs(payload: Any, *, file_path: Path) -> List[str]:
    """Estrae i nomi plug (unici, in ordine di prima apparizione) da un manifest già parsato."""
    if payload is None:
        return []
    if not isinstance(payload, Mapping):
        raise ConfigError("snap.yaml deve contenere un mapping", file_path=str(file_path))

    apps = payload.get("apps")
    if apps is None:
        return []
    if not isinstance(apps, Mapping):
        raise ConfigError("La sezione 'apps' deve essere un mapping", file_path=str(file_path))

    names: List[str] = []
    seen: set[str] = set()
    for app_name, app in apps.items():
        if app is None:
            continue
        if not isinstance(app, Mapping):
            raise ConfigError(f"App non valida: {app_name!r}", file_path=str(file_path))
        plugs = app.get("plugs")
        if plugs is None:
            continue
        if not isinstance(plugs, list):
            raise ConfigError(f"'plugs' dell'app {app_name!r} deve essere una lista", file_path=str(file_path))
        for plug in plugs:
            if not isinstance(plug, str) or not plug.strip():
                raise ConfigError(
                    f"Nome plug non valido nell'app {app_name!r}: {plug!r}", file_path=str(file_path)
                )
            if plug not in seen:
                seen.add(plug)
                names.append(plug)
    return names


def collect_manifest_plugs(snap_dir: Path | str, *, logger: Optional[logging.Logger] = None) -> List[str]:
    """Legge meta/snap.yaml (sempre atteso) e ritorna le plug referenziate dalle app."""
    log = logger or _logger
    path = manifest_path(snap_dir)
    names = parse_manifest_plugs(yaml_read(snap_dir, path), file_path=path)
    log.info("manifest.plugs_collected", extra={"file_path": tail_path(path), "plug_count": len(names)})
    return names


__all__ = ["parse_manifest_plugs", "collect_manifest_plugs"]
