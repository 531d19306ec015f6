"""
Configuration loading for the notes converter.
"""
from dataclasses import dataclass, fields, replace
from datetime import tzinfo
from pathlib import Path
from typing import Any, Dict, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .render import DEFAULT_TAG, DUE_DATE_GLYPH


class ConfigError(RuntimeError):
    """Raised when a configuration file or value is invalid."""


@dataclass(frozen=True)
class NotesConfig:
    output_dir: str = "."
    timezone: Optional[str] = None  # IANA name; None means local time
    tag: str = DEFAULT_TAG
    due_glyph: str = DUE_DATE_GLYPH
    index: bool = False
    actionable: bool = True

    def tzinfo(self) -> Optional[tzinfo]:
        return resolve_timezone(self.timezone)


_FIELD_TYPES = {
    "output_dir": str,
    "timezone": str,
    "tag": str,
    "due_glyph": str,
    "index": bool,
    "actionable": bool,
}


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Look up an IANA zone; None or "local" selects the process's local zone."""
    if name is None or name.strip().lower() in {"", "local"}:
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown time zone: {name}") from e


def _check_values(values: Dict[str, Any], source: str) -> Dict[str, Any]:
    unknown = sorted(set(values) - set(_FIELD_TYPES))
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")
    for key, value in values.items():
        expected = _FIELD_TYPES[key]
        if value is None and key == "timezone":
            continue
        if not isinstance(value, expected):
            raise ConfigError(f"{source}: {key} must be a {expected.__name__}")
    if "tag" in values and not values["tag"].strip():
        raise ConfigError(f"{source}: tag must be non-empty")
    return values


def load_config(config_path: Optional[Union[str, Path]] = None) -> NotesConfig:
    """Load configuration from a YAML file, or return defaults when no path is given."""
    config = NotesConfig()
    if config_path is None:
        return config

    path = Path(config_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    values = _check_values(data, str(path))
    config = replace(config, **values)
    # Fail early on a bad zone rather than at write time.
    config.tzinfo()
    return config


def apply_overrides(config: NotesConfig, **overrides: Any) -> NotesConfig:
    """Return a copy of config with every non-None override applied."""
    known = {f.name for f in fields(NotesConfig)}
    values = {key: value for key, value in overrides.items() if key in known and value is not None}
    return replace(config, **_check_values(values, "command line"))
