"""YAML config loader and dotted-key lookup."""

from pathlib import Path
from typing import Any

import yaml

from riverwatch.config.schema import DashboardConfig


def load_config(path: str | Path | None) -> DashboardConfig:
    """Load and validate config from a YAML file.

    A missing path or an empty file yields the built-in defaults.
    """
    if path is None:
        return DashboardConfig()
    path = Path(path)
    if not path.exists():
        return DashboardConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return DashboardConfig(**raw)


def get_config_value(config: DashboardConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'contamination.high_risk_threshold'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
