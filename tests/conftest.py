"""Shared fixtures for tasktrack tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use tasktrack.io_utils read_text/write_text for consistent UTF-8 I/O.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tasktrack import log
from tasktrack.io_utils import write_text
from tasktrack.tasks.model import Task


def _make_task(
    id: str,
    title: str = "",
    status: str = "pending",
    priority: str = "",
    effort: str = "",
    dependencies: list[str] | None = None,
    touches: list[str] | None = None,
    **extra: object,
) -> Task:
    return Task(
        id=id,
        title=title or f"Task {id}",
        status=status,
        priority=priority,
        effort=effort,
        dependencies=dependencies or [],
        touches=touches or [],
        **extra,
    )


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def project_chain() -> list[Task]:
    """T1..T5 fixture: two completed roots feeding three open tasks."""
    return [
        _make_task("T1", status="completed"),
        _make_task("T2", status="completed", dependencies=["T1"]),
        _make_task("T3", status="in-progress", dependencies=["T1", "T2"]),
        _make_task("T4", dependencies=["T2"]),
        _make_task("T5", dependencies=["T3", "T4"]),
    ]


@pytest.fixture
def write_tasks_yaml():
    """Write a tasks.yaml (and optional .tasktrack.yaml) under a directory."""

    def _write(directory: Path, tasks_yaml: str, config_yaml: str | None = None) -> Path:
        path = directory / "tasks.yaml"
        write_text(path, tasks_yaml)
        if config_yaml is not None:
            write_text(directory / ".tasktrack.yaml", config_yaml)
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_verbose():
    """Debug output is a module-level switch; start every test quiet."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)
