"""Tests for tasktrack.tasks.io: YAML task file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from tasktrack.errors import TaskFileError
from tasktrack.io_utils import write_text
from tasktrack.tasks.io import load_task_file, parse_task_file


class TestParseTaskFile:
    """Tests for parse_task_file()."""

    def test_full_entry(self):
        """Every supported key lands on the Task."""
        tf = parse_task_file(
            """
version: 1
tasks:
  - id: "001"
    title: Set up
    status: in-progress
    priority: high
    effort: small
    dependencies: ["000"]
    touches: [api, db]
    tags: cli
    group: core
    owner: ana
    parent: "000"
""",
            source="tasks.yaml",
        )
        task = tf.tasks[0]
        assert task.id == "001"
        assert task.status == "in-progress"
        assert task.priority == "high"
        assert task.effort == "small"
        assert task.dependencies == ["000"]
        assert task.touches == ["api", "db"]
        assert task.tags == ["cli"]
        assert task.group == "core"
        assert task.owner == "ana"
        assert task.parent == "000"
        assert task.file_path == "tasks.yaml"

    def test_defaults(self):
        """Missing keys get model defaults; status defaults to pending."""
        task = parse_task_file("tasks:\n  - id: A\n").tasks[0]
        assert task.status == "pending"
        assert task.title == ""
        assert task.touches == []

    @pytest.mark.parametrize("key", ["dependencies", "depends_on", "dependsOn"])
    def test_dependency_aliases(self, key):
        """All dependency spellings are accepted."""
        task = parse_task_file(f"tasks:\n  - id: B\n    {key}: [A]\n").tasks[0]
        assert task.dependencies == ["A"]

    def test_null_dependency_key_falls_through(self):
        """An empty ``dependencies:`` does not hide a populated alias."""
        task = parse_task_file("tasks:\n  - id: B\n    dependencies:\n    depends_on: [A]\n").tasks[0]
        assert task.dependencies == ["A"]

    def test_numeric_ids_are_stringified(self):
        """Unquoted numeric ids become strings."""
        tf = parse_task_file("tasks:\n  - id: 7\n    dependencies: [6]\n")
        assert tf.tasks[0].id == "7"
        assert tf.tasks[0].dependencies == ["6"]

    def test_empty_document(self):
        """An empty file is an empty task list."""
        assert parse_task_file("").tasks == []

    @pytest.mark.parametrize(
        "text, message",
        [
            ("tasks: [unclosed\n", "Invalid YAML"),
            ("- id: A\n", "top level"),
            ("tasks: {id: A}\n", "must be a list"),
            ("tasks:\n  - title: nameless\n", "missing id"),
            ("tasks:\n  - just-a-string\n", "expected a mapping"),
            ("tasks:\n  - id: A\n    touches: {a: 1}\n", "touches"),
            ("version: one\ntasks: []\n", "version"),
        ],
    )
    def test_malformed(self, text, message):
        """Shape errors raise TaskFileError with a pointed message."""
        with pytest.raises(TaskFileError, match=message):
            parse_task_file(text)


class TestLoadTaskFile:
    """Tests for load_task_file()."""

    def test_load(self, tmp_path: Path):
        path = tmp_path / "tasks.yaml"
        write_text(path, "tasks:\n  - id: A\n  - id: B\n    dependencies: [A]\n")
        tf = load_task_file(path)
        assert tf.ids() == ["A", "B"]
        assert tf.path == str(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TaskFileError, match="not found"):
            load_task_file(tmp_path / "nope.yaml")
