# SPDX-License-Identifier: GPL-3.0-or-later
# src/plugcheck/yaml_utils.py
"""
Utility centralizzata per la lettura YAML sicura e uniforme.

Obiettivi
- Path-safety: valida che il file sia sotto una base consentita (fail-closed).
- Encoding coerente (utf-8) e SafeLoader ovunque.
- Errori chiari e consistenti:
  - file assente → InputFileMissing (i caller con file opzionali verificano prima);
  - lettura fallita → FlagAccessError;
  - YAML malformato o encoding non valido → ConfigError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError, FlagAccessError, InputFileMissing
from .paths import ensure_within_and_resolve


def yaml_read(base: Path | str, path: Path | str, *, encoding: str = "utf-8") -> Any:
    """Legge un file YAML in modo sicuro e uniforme (yaml.safe_load)."""
    safe_p = ensure_within_and_resolve(base, path)
    try:
        text = safe_p.read_text(encoding=encoding)
    except FileNotFoundError as e:
        raise InputFileMissing("File YAML non trovato", file_path=str(safe_p)) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Encoding non valido: {e}", file_path=str(safe_p)) from e
    except OSError as e:
        raise FlagAccessError(f"Errore lettura file: {e}", file_path=str(safe_p)) from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML malformato: {e}", file_path=str(safe_p)) from e


__all__ = ["yaml_read"]
