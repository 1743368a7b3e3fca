"""UTF-8 file helpers for task files, project config and graph output."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

PathLike = Path | str


def read_text(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")


def read_yaml(path: PathLike) -> Any:
    """Parse the YAML document at *path* with ``safe_load``.

    An empty document yields ``None``.  ``yaml.YAMLError``, ``OSError`` and
    ``UnicodeDecodeError`` propagate; callers wrap them in their own error.
    """
    return yaml.safe_load(read_text(path))


def write_text(path: PathLike, text: str, *, make_parents: bool = False) -> None:
    """Write *text* as UTF-8, creating missing parent directories if asked."""
    p = Path(path)
    if make_parents:
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
