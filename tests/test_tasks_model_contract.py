"""Contract tests for task data models consumed by the engine and loaders."""

from __future__ import annotations

from dataclasses import fields

from tasktrack.tasks.model import Effort, Priority, Status, Task, TaskFile


def test_task_fields() -> None:
    names = {f.name for f in fields(Task)}
    assert {"id", "title", "status", "priority", "effort", "dependencies", "touches", "file_path"} <= names


def test_task_defaults() -> None:
    t = Task(id="A")
    assert t.status == Status.PENDING
    assert t.priority == ""
    assert t.dependencies == [] and t.touches == []


def test_enums_compare_equal_to_strings() -> None:
    assert Status.IN_PROGRESS == "in-progress"
    assert Priority.CRITICAL == "critical"
    assert Effort.SMALL == "small"


def test_taskfile_helpers() -> None:
    tf = TaskFile(tasks=[Task(id="A"), Task(id="B")])
    assert tf.version == 1
    assert tf.ids() == ["A", "B"]
    assert tf.get_task("B") is tf.tasks[1]
    assert tf.get_task("C") is None
