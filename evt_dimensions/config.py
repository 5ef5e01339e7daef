"""Configuration helpers for loading the YAML-driven defaults.

The shipped defaults live in ``evt_dimensions/data/defaults.yaml``. The helpers
return plain Python objects so downstream modules stay dependency-light. Runtime
settings can be overridden through environment variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

from evt_dimensions.exceptions import ConfigurationError


PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "data" / "defaults.yaml"

ENV_SHOW_PROGRESS = "EVT_DIMENSIONS_SHOW_PROGRESS"
ENV_MAX_WORKERS = "EVT_DIMENSIONS_MAX_WORKERS"

_REQUIRED_SECTIONS = ("exceedances", "block_maxima", "runtime")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _load_yaml(path: Path) -> Any:
    """Load a YAML file and return its contents."""
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def load_defaults(config_path: Path | None = None) -> dict[str, Any]:
    """Load estimator and runtime defaults from YAML."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"defaults config is not a mapping: {path}")
    missing = [s for s in _REQUIRED_SECTIONS if s not in data]
    if missing:
        raise ConfigurationError(f"defaults config missing sections {missing}: {path}")
    return data


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{ENV_SHOW_PROGRESS} must be a boolean flag, got {raw!r}")


def default_show_progress(config: dict[str, Any] | None = None) -> bool:
    """Whether progress bars are shown when the caller does not say."""
    if (raw := os.getenv(ENV_SHOW_PROGRESS)) is not None:
        return _parse_bool(raw)
    cfg = config or load_defaults()
    return bool(cfg["runtime"].get("show_progress", False))


def default_max_workers(config: dict[str, Any] | None = None) -> int:
    """Worker pool size: env override, then config, then the CPU count."""
    if raw := os.getenv(ENV_MAX_WORKERS):
        try:
            workers = int(raw)
        except ValueError:
            raise ConfigurationError(f"{ENV_MAX_WORKERS} must be an integer, got {raw!r}") from None
    else:
        cfg = config or load_defaults()
        workers = cfg["runtime"].get("max_workers") or os.cpu_count() or 1
    if workers < 1:
        raise ConfigurationError(f"max_workers must be >= 1, got {workers}")
    return int(workers)


def dump_json(data: Any) -> str:
    """Pretty-print helper used in scripts and logging."""
    return json.dumps(data, indent=2, sort_keys=True, default=str)
