import json
import os
from pathlib import Path

from annotate.errors import ConfigError

DEFAULTS_PATH = Path(__file__).parent / "config.default.json"
OVERRIDES_FILENAME = ".annotate.json"


def load_config(environ=None) -> dict:
    """Load config by merging packaged defaults with the user's overrides.

    Overrides live in $HOME/.annotate.json. Without HOME only the defaults
    are returned; locating the store reports the missing HOME later.
    """
    if environ is None:
        environ = os.environ

    with open(DEFAULTS_PATH, encoding="utf-8") as f:
        config = json.load(f)

    home = environ.get("HOME")
    if not home:
        return config

    overrides_path = Path(home) / OVERRIDES_FILENAME
    if overrides_path.exists():
        try:
            with open(overrides_path, encoding="utf-8") as f:
                overrides = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Config file {overrides_path} could not be read: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigError(f"Config file {overrides_path} must contain a JSON object")
        config = _deep_merge(config, overrides)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base. Override values win."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
