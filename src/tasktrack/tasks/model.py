"""Task and TaskFile data models consumed by the graph and planning engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Effort(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass
class Task:
    """One unit of work.

    ``status``, ``priority`` and ``effort`` hold plain strings; the enums
    above name the recognized values and compare equal to them.  An empty
    ``priority`` or ``effort`` means "unspecified".
    """

    id: str
    title: str = ""
    status: str = Status.PENDING.value
    priority: str = ""
    effort: str = ""
    dependencies: list[str] = field(default_factory=list)
    touches: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    group: str = ""
    owner: str = ""
    parent: str = ""
    file_path: str = ""


@dataclass
class TaskFile:
    tasks: list[Task] = field(default_factory=list)
    version: int = 1
    path: str = ""

    def ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def get_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None
