"""Configuration loading."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from exmatch.core.constants import PREFERRED_CHANNELS

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_data_dir() -> Path:
    """Resolve XDG-style data directory with env override."""
    raw = os.getenv("EXMATCH_DATA_DIR", "~/.local/share/exmatch")
    return expand_path(raw)


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("EXMATCH_CONFIG_FILE", "~/.config/exmatch/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    data_dir = default_data_dir()
    return {
        "catalog": {
            "path": str(data_dir / "catalog.json"),
        },
        "youtube": {
            "api_key_envs": ["YOUTUBE_API_KEY", "YOUTUBE_API_KEY_2", "YOUTUBE_API_KEY_3"],
            "max_results": 10,
        },
        "api": {
            "rate_limit_delay": 1.0,
            "max_retries": 3,
            "timeout_seconds": 30,
        },
        "search": {
            "batch_size": 5,
            "batch_delay": 2.0,
            # 0 tries every generated query.
            "max_queries": 0,
            "preferred_channels": list(PREFERRED_CHANNELS),
        },
        "resolver": {
            "workers": 5,
            "threshold": 70,
            "max_slug_attempts": 20,
        },
        "classification": {
            "rules": {},
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()
    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))
    return cfg


def resolve_catalog_path(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve catalog file path with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("EXMATCH_CATALOG") or config.get("catalog", {}).get("path")
    if not raw:
        raw = str(default_data_dir() / "catalog.json")
    return expand_path(raw)


def resolve_api_keys(config: Dict[str, Any]) -> List[str]:
    """Collect API keys from the configured environment variables, in order."""
    env_names = config.get("youtube", {}).get("api_key_envs") or ["YOUTUBE_API_KEY"]
    if isinstance(env_names, str):
        env_names = [env_names]
    keys: List[str] = []
    for name in env_names:
        value = (os.getenv(str(name)) or "").strip()
        if value and value not in keys:
            keys.append(value)
    return keys
