"""Tracker settings loaded from YAML/JSON sources."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from fintracklab.core.compounding import UNCLASSIFIED
from fintracklab.core.errors import ConfigError
from fintracklab.core.projection import PROJECTION_MONTHS

__all__ = ["TrackerSettings", "load_settings", "read_mapping"]

_LANGUAGES = {"en", "pt"}
_THEMES = {"light", "dark"}


@dataclass(slots=True)
class TrackerSettings:
    """
    User-level settings consumed by the orchestration layer.

    Attributes:
        emergency_fund_goal: Target for the emergency fund progress figure
        projection_months: Horizon of the net worth projection
        unclassified_label: Portfolio bucket for investments without a type
        language: Display language ("en" or "pt")
        theme: Display theme ("light" or "dark")
    """

    emergency_fund_goal: float = 10000.0
    projection_months: int = PROJECTION_MONTHS
    unclassified_label: str = UNCLASSIFIED
    language: str = "en"
    theme: str = "dark"

    def __post_init__(self) -> None:
        if isinstance(self.projection_months, bool) or not isinstance(
            self.projection_months, int
        ):
            raise ConfigError("projection_months must be an integer")
        if self.projection_months < 1:
            raise ConfigError(
                f"projection_months must be >= 1, got {self.projection_months}"
            )
        if isinstance(self.emergency_fund_goal, bool) or not isinstance(
            self.emergency_fund_goal, (int, float)
        ):
            raise ConfigError("emergency_fund_goal must be a number")
        self.emergency_fund_goal = float(self.emergency_fund_goal)
        if self.language not in _LANGUAGES:
            raise ConfigError(
                f"language must be one of {sorted(_LANGUAGES)}, got {self.language!r}"
            )
        if self.theme not in _THEMES:
            raise ConfigError(
                f"theme must be one of {sorted(_THEMES)}, got {self.theme!r}"
            )
        if not isinstance(self.unclassified_label, str) or not self.unclassified_label:
            raise ConfigError("unclassified_label must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_settings(
    source: str | Path | dict[str, Any] | None = None, *, format: str | None = None
) -> TrackerSettings:
    """
    Load settings from a mapping or a YAML/JSON file, merged over the defaults.

    **Args:**
        source: Mapping, file path, or None for defaults
        format: Force "yaml" or "json" instead of inferring from the suffix

    **Returns:**
        TrackerSettings

    **Raises:**
        ConfigError: On unknown keys, wrong types or a non-mapping root
        FileNotFoundError: If the path does not exist

    **Example:**
        ```yaml
        # settings.yaml
        emergency_fund_goal: 15000
        projection_months: 120
        ```
    """
    if source is None:
        return TrackerSettings()

    mapping, label = read_mapping(source, format=format)
    known = {f.name for f in fields(TrackerSettings)}
    unknown = sorted(set(mapping) - known)
    if unknown:
        raise ConfigError(f"{label}: unknown settings {unknown}")
    return TrackerSettings(**mapping)


def read_mapping(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> tuple[dict[str, Any], str]:
    """Read a mapping from a dict or a YAML/JSON file; returns it with a source label."""
    if isinstance(source, dict):
        return dict(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML ({exc})") from exc
    elif fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    else:
        raise ConfigError(f"Unsupported settings format '{fmt}' for {path}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings root must be a mapping (source={path})")
    return data, str(path)
