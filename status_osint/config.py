from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

DEFAULT_CFG = Path(__file__).with_name("config_default.yaml")

PLAYTIME_SOURCES = ("recent", "owned")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("status_file", "output_file", "graph_dir"):
        if not isinstance(cfg.get(key), str) or not cfg[key].strip():
            raise ConfigError(f"{key} must be a non-empty string")
    for key in ("app_id", "max_workers"):
        v = cfg.get(key)
        if isinstance(v, bool) or not isinstance(v, int) or v < 1:
            raise ConfigError(f"{key} must be a positive integer")
    timeout = cfg.get("request_timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        raise ConfigError("request_timeout must be a positive number or null")
    if cfg.get("playtime_source") not in PLAYTIME_SOURCES:
        raise ConfigError(f"playtime_source must be one of {PLAYTIME_SOURCES}")
    for key in ("isolate_player_failures", "export_graph"):
        if not isinstance(cfg.get(key), bool):
            raise ConfigError(f"{key} must be true or false")
    level = str(cfg.get("log_level", "")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {LOG_LEVELS}")
    cfg["log_level"] = level
    return cfg


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Defaults, overlaid with the user's YAML when given."""
    cfg = _read_yaml(DEFAULT_CFG)
    if path is not None:
        user = _read_yaml(Path(path))
        unknown = set(user) - set(cfg)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
        cfg.update(user)
    return validate(cfg)
