#!/usr/bin/env python3
"""
Config Module
Export settings: defaults, optional YAML config file, explicit overrides.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULTS = {
    "style": "tagged",
    "max_depth": 20,
    "read_error_placeholders": False,
    "encoding": "utf-8",
}


@dataclass
class ExportSettings:
    """Settings for one material library export

    Attributes:
        style: Format style ('flow', 'tagged', 'prefixed')
        max_depth: Maximum node depth expanded by the walker
        read_error_placeholders: Emit placeholders for unreadable properties
        encoding: Output file encoding
    """
    style: str = DEFAULTS["style"]
    max_depth: int = DEFAULTS["max_depth"]
    read_error_placeholders: bool = DEFAULTS["read_error_placeholders"]
    encoding: str = DEFAULTS["encoding"]

    def validate(self) -> 'ExportSettings':
        """Check and normalize settings

        Raises:
            ValueError: If a setting is invalid
        """
        from exporters import resolve_style

        self.style = resolve_style(self.style)
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        try:
            "".encode(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown output encoding: {self.encoding}")
        self.read_error_placeholders = bool(self.read_error_placeholders)
        return self


def load_settings(config_path: Optional[str] = None, **overrides) -> ExportSettings:
    """Build validated export settings

    Values are merged in order: DEFAULTS, then the YAML config file (if any),
    then keyword overrides whose value is not None.

    Args:
        config_path: Optional path to a YAML file with setting keys
        **overrides: Explicit setting values (e.g. from command-line flags)

    Returns:
        ExportSettings: Validated settings

    Raises:
        ValueError: If the config file cannot be read or a setting is invalid
    """
    values = dict(DEFAULTS)
    known = {f.name for f in fields(ExportSettings)}

    if config_path is not None:
        path = Path(config_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Cannot read config file {path}: {e}")
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        unknown = set(loaded) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(map(str, unknown)))}")
        values.update(loaded)

    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown setting: {key}")
        if value is not None:
            values[key] = value

    return ExportSettings(**values).validate()
