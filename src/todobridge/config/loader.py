from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("todobridge.config.yaml")

DATASTORE_DEFAULTS: Dict[str, Any] = {
    "url": "http://127.0.0.1:8000",
    "namespace": "test",
    "database": "test",
    "username": None,
    "password": None,
    "timeout_seconds": 10,
}

_STRING_FIELDS = ("url", "namespace", "database")


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load runtime configuration from YAML.

    Args:
        path: Optional path to the config file. Defaults to todobridge.config.yaml

    Returns:
        Dictionary with configuration (empty if the file is empty)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the top level is not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    return config


def get_datastore_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve the ``datastore`` section with built-in defaults.

    Defaults:
    - url: http://127.0.0.1:8000
    - namespace / database: test
    - username / password: None (no auth header)
    - timeout_seconds: 10
    """
    section = (config or {}).get("datastore") or {}
    if not isinstance(section, dict):
        raise ValueError("Config 'datastore' must be a dictionary if provided")

    settings = {**DATASTORE_DEFAULTS, **section}
    for key in _STRING_FIELDS:
        if not isinstance(settings[key], str) or not settings[key]:
            raise ValueError(f"Config 'datastore.{key}' must be a non-empty string")

    timeout = settings["timeout_seconds"]
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError("Config 'datastore.timeout_seconds' must be a positive number")
    return settings
