"""Exception types raised by tasktrack."""

from __future__ import annotations


class TaskTrackError(Exception):
    """Base class for every error tasktrack reports to its caller."""


class FilterError(TaskTrackError, ValueError):
    """A ``field=value`` filter expression is malformed or names an unknown field."""


class TaskFileError(TaskTrackError):
    """A task file is missing, unreadable, or not shaped like a task list."""


class ConfigError(TaskTrackError):
    """Project configuration is malformed."""
