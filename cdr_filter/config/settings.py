"""Runtime settings: defaults, optional JSON config file, CDR_* environment."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "CDR_"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "operator": "jio",
    "crime": "",
    "cells": None,
    "lrn": None,
    "headers": None,
    "call_types": None,
    "output_dir": "filtered",
    "format": "csv",
    "workers": 1,
}

_INT_KEYS = {"workers"}


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def diag_enabled() -> bool:
    """Extra diagnostic logging, opt-in via CDR_DIAG."""
    return _truthy(os.getenv(f"{ENV_PREFIX}DIAG", "0"))


def _from_env() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in DEFAULT_SETTINGS:
        raw = os.getenv(f"{ENV_PREFIX}{key.upper()}")
        if raw is None or raw.strip() == "":
            continue
        if key in _INT_KEYS:
            try:
                values[key] = int(raw)
            except ValueError:
                logger.warning(f"Ignoring non-integer {ENV_PREFIX}{key.upper()}={raw!r}")
            continue
        values[key] = raw.strip()
    return values


def load_settings(
    config_path: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Merge settings with precedence: overrides > environment > JSON file > defaults.

    Override values of None are treated as "not given" so argparse namespaces
    can be passed straight through.
    """
    settings = dict(DEFAULT_SETTINGS)

    if config_path:
        path = Path(config_path)
        with open(path, "r", encoding="utf-8") as f:
            file_values = json.load(f)
        if not isinstance(file_values, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        unknown = sorted(set(file_values) - set(DEFAULT_SETTINGS))
        if unknown:
            logger.warning(f"Unknown config keys ignored: {unknown}")
        settings.update({k: v for k, v in file_values.items() if k in DEFAULT_SETTINGS})

    settings.update(_from_env())

    if overrides:
        settings.update({k: v for k, v in overrides.items() if k in DEFAULT_SETTINGS and v is not None})

    if settings["format"] not in {"csv", "xlsx", "both"}:
        raise ValueError(f"Unsupported output format: {settings['format']}")
    return settings
