"""Unified configuration layer for the PearAI client.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) pointed to by
       ``PEARAI_CONFIG_FILE``
    3. Environment variables
    4. In-code overrides passed to ``get_client_config``

Environment Variables
---------------------
PEARAI_SERVER_URL, PEARAI_UNIQUE_ID, PEARAI_EXTENSION_VERSION, PEARAI_OS,
PEARAI_ACCESS_TOKEN, PEARAI_REFRESH_TOKEN, PEARAI_TELEMETRY (bool),
PEARAI_MODELS (comma separated), PEARAI_DEFAULT_MODEL.

External Config File (Optional)
-------------------------------
JSON is tried first; YAML is used when PyYAML is installed. Example:

```
server_url: http://localhost:8000
telemetry: true
models: [gpt-4o, starcoder-7b]
```

Public API
----------
* get_client_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import (
    DEFAULT_MODEL,
    DEFAULT_MODELS,
    IMAGE_DETAIL,
    STOP_SEQUENCE_LIMIT,
    SERVER_URL,
    UNLIMITED_STOP_MODELS,
)

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore


DEFAULTS: Dict[str, Any] = {
    "server_url": SERVER_URL,
    "models": list(DEFAULT_MODELS),
    "default_model": DEFAULT_MODEL,
    "stop_limit": STOP_SEQUENCE_LIMIT,
    "unlimited_stop_models": list(UNLIMITED_STOP_MODELS),
    "image_detail": IMAGE_DETAIL,
    "telemetry": False,
}

ENV_FIELD_MAP = {
    "server_url": "PEARAI_SERVER_URL",
    "unique_id": "PEARAI_UNIQUE_ID",
    "extension_version": "PEARAI_EXTENSION_VERSION",
    "os": "PEARAI_OS",
    "access_token": "PEARAI_ACCESS_TOKEN",
    "refresh_token": "PEARAI_REFRESH_TOKEN",
    "telemetry": "PEARAI_TELEMETRY",
    "models": "PEARAI_MODELS",
    "default_model": "PEARAI_DEFAULT_MODEL",
}

_TRUTHY = {"1", "t", "true", "y", "yes", "on"}

_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("PEARAI_CONFIG_FILE")
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    data: Any = {}
    try:
        data = json.loads(text)
    except ValueError:
        if yaml is not None:
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError:
                data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _coerce(field: str, raw: str) -> Any:
    if field == "telemetry":
        return raw.strip().lower() in _TRUTHY
    if field == "models":
        return [m.strip() for m in raw.split(",") if m.strip()]
    return raw


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, name in ENV_FIELD_MAP.items():
        val = os.getenv(name)
        if val is not None and val != "":
            out[field] = _coerce(field, val)
    return out


def get_client_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def reset_config_cache() -> None:
    """Forget the cached config file contents (tests, config reloads)."""
    global _FILE_CACHE
    _FILE_CACHE = None


__all__ = [
    "DEFAULTS",
    "get_client_config",
    "reset_config_cache",
]
