"""Load a YAML task file into Task / TaskFile models.

Expected shape::

    version: 1
    tasks:
      - id: "001"
        title: Set up project
        status: completed
        priority: high
        effort: small
        touches: [build]
      - id: "002"
        title: Add auth
        dependencies: ["001"]

Quote numeric-looking ids: YAML reads an unquoted ``001`` as the integer 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from tasktrack import log
from tasktrack.errors import TaskFileError
from tasktrack.io_utils import PathLike, read_text
from tasktrack.tasks.model import Status, Task, TaskFile

_DEPENDENCY_KEYS = ("dependencies", "depends_on", "dependsOn")


def _as_list(value: Any, key: str, where: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [str(value)]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v) != ""]
    raise TaskFileError(f"{where}: '{key}' must be a list of strings")


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def task_from_dict(data: dict[str, Any], *, file_path: str = "", where: str = "task") -> Task:
    """Build a Task from one mapping of a task file."""
    if not isinstance(data, dict):
        raise TaskFileError(f"{where}: expected a mapping, got {type(data).__name__}")
    task_id = _as_str(data.get("id")).strip()
    if not task_id:
        raise TaskFileError(f"{where}: missing id")

    # First spelling with a non-null value wins
    deps: list[str] = []
    for key in _DEPENDENCY_KEYS:
        if data.get(key) is not None:
            deps = _as_list(data[key], key, where)
            break

    return Task(
        id=task_id,
        title=_as_str(data.get("title")),
        status=_as_str(data.get("status")) or Status.PENDING.value,
        priority=_as_str(data.get("priority")),
        effort=_as_str(data.get("effort")),
        dependencies=deps,
        touches=_as_list(data.get("touches"), "touches", where),
        tags=_as_list(data.get("tags"), "tags", where),
        group=_as_str(data.get("group")),
        owner=_as_str(data.get("owner")),
        parent=_as_str(data.get("parent")),
        file_path=_as_str(data.get("file_path")) or file_path,
    )


def parse_task_file(text: str, *, source: str = "<string>") -> TaskFile:
    """Parse YAML *text* into a TaskFile. *source* is used in error messages."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TaskFileError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        return TaskFile(path=source)
    if not isinstance(data, dict):
        raise TaskFileError(f"{source}: top level must be a mapping with a 'tasks' list")

    raw_tasks = data.get("tasks") or []
    if not isinstance(raw_tasks, list):
        raise TaskFileError(f"{source}: 'tasks' must be a list")

    version = data.get("version", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise TaskFileError(f"{source}: 'version' must be an integer")

    tasks = [
        task_from_dict(entry, file_path=source, where=f"{source}: tasks[{i}]")
        for i, entry in enumerate(raw_tasks)
    ]
    log.debug(f"Loaded {len(tasks)} task(s) from {source}")
    return TaskFile(tasks=tasks, version=version, path=source)


def load_task_file(path: PathLike) -> TaskFile:
    """Read and parse the task file at *path*."""
    p = Path(path)
    if not p.is_file():
        raise TaskFileError(f"Task file not found: {p}")
    try:
        text = read_text(p)
    except (OSError, UnicodeDecodeError) as e:
        raise TaskFileError(f"Cannot read {p}: {e}") from e
    return parse_task_file(text, source=str(p))
