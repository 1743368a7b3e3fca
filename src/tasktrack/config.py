"""Configuration defaults, env vars, and project config loading for tasktrack."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from tasktrack.errors import ConfigError
from tasktrack.io_utils import PathLike, read_yaml


VERSION = "0.3.0"

CONFIG_FILENAME = ".tasktrack.yaml"
DEFAULT_TASKS_FILE = "tasks.yaml"
DEFAULT_NEXT_LIMIT = 5


@dataclass
class ScoringWeights:
    """Points awarded by the recommendation score, one field per table row."""

    priority_critical: int = 40
    priority_high: int = 30
    priority_medium: int = 20
    priority_low: int = 10
    critical_path: int = 15
    per_downstream: int = 3
    downstream_max: int = 15
    effort_small: int = 5
    effort_medium: int = 2
    effort_large: int = 0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ScoringWeights":
        """Build weights from *data*, overriding only the keys it names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown scoring weight(s): {', '.join(unknown)}")
        values: dict[str, int] = {}
        for key, value in data.items():
            # bool is an int subclass but never a meaningful weight
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"Scoring weight '{key}' must be an integer, got {value!r}")
            values[key] = value
        return cls(**values)


@dataclass
class Config:
    """Runtime configuration shared by the CLI commands."""

    tasks_file: str = ""
    next_limit: int = DEFAULT_NEXT_LIMIT
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    # Known touch scopes; None means "not configured" (no scope warnings)
    scopes: dict[str, Any] | None = None

    # Debug output; -v on the command line or `verbose: true` in the file
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.tasks_file:
            self.tasks_file = os.environ.get("TASKTRACK_TASKS_FILE") or DEFAULT_TASKS_FILE
        if self.next_limit <= 0:
            self.next_limit = DEFAULT_NEXT_LIMIT

    def known_scopes(self) -> set[str] | None:
        if self.scopes is None:
            return None
        return set(self.scopes)


def load_config(base_dir: PathLike | None = None, **overrides: Any) -> Config:
    """Read ``.tasktrack.yaml`` from *base_dir* (default cwd) into a Config.

    A missing file yields defaults.  Keyword *overrides* are applied on top
    of whatever the file sets.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    path = base / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if path.is_file():
        try:
            loaded = read_yaml(path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        data = loaded

    kwargs: dict[str, Any] = {}

    scopes = data.get("scopes")
    if scopes is not None:
        if isinstance(scopes, list):
            scopes = {str(name): {} for name in scopes}
        if not isinstance(scopes, dict):
            raise ConfigError(f"{path}: 'scopes' must be a mapping or a list of names")
        kwargs["scopes"] = {str(k): v for k, v in scopes.items()}

    scoring = data.get("scoring")
    if scoring is not None:
        if not isinstance(scoring, dict):
            raise ConfigError(f"{path}: 'scoring' must be a mapping")
        kwargs["weights"] = ScoringWeights.from_mapping(scoring)

    limit = data.get("next_limit")
    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ConfigError(f"{path}: 'next_limit' must be an integer")
        kwargs["next_limit"] = limit

    verbose = data.get("verbose")
    if verbose is not None:
        if not isinstance(verbose, bool):
            raise ConfigError(f"{path}: 'verbose' must be true or false")
        kwargs["verbose"] = verbose

    if "tasks_file" in data:
        kwargs["tasks_file"] = str(data["tasks_file"] or "")

    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**kwargs)
