"""``field=value`` filter expressions used to narrow a task list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from tasktrack.errors import FilterError
from tasktrack.tasks.model import Task


@dataclass(frozen=True)
class Criteria:
    field: str
    value: str


def _match_bool_or_value(field_value: str, value: str) -> bool:
    """``true``/``false`` test presence; anything else is exact equality."""
    if value == "true":
        return field_value != ""
    if value == "false":
        return field_value == ""
    return field_value == value


def _match_blocked(task: Task, value: str) -> bool:
    has_deps = len(task.dependencies) > 0
    return (value == "true" and has_deps) or (value == "false" and not has_deps)


_MATCHERS: dict[str, Callable[[Task, str], bool]] = {
    "status": lambda t, v: t.status == v,
    "priority": lambda t, v: t.priority == v,
    "effort": lambda t, v: t.effort == v,
    "id": lambda t, v: t.id == v,
    "group": lambda t, v: t.group == v,
    "owner": lambda t, v: t.owner == v,
    "title": lambda t, v: v.lower() in t.title.lower(),
    "blocked": _match_blocked,
    "tag": lambda t, v: v in t.tags,
    "parent": lambda t, v: _match_bool_or_value(t.parent, v),
    "touches": lambda t, v: v in t.touches,
}

SUPPORTED_FIELDS: tuple[str, ...] = tuple(_MATCHERS)


def parse(expr: str) -> Criteria:
    """Parse one ``field=value`` expression."""
    name, sep, value = expr.partition("=")
    if not sep:
        raise FilterError(f"invalid filter format (expected field=value): {expr}")
    name = name.strip()
    if not name:
        raise FilterError(f"invalid filter format (empty field name): {expr}")
    if name not in _MATCHERS:
        raise FilterError(
            f"unsupported filter field '{name}' (supported: {', '.join(SUPPORTED_FIELDS)})"
        )
    return Criteria(field=name, value=value.strip())


def matches(task: Task, criteria: Iterable[Criteria]) -> bool:
    return all(_MATCHERS[c.field](task, c.value) for c in criteria)


def apply(tasks: Iterable[Task], exprs: Iterable[str]) -> list[Task]:
    """Return the tasks matching every expression (AND), preserving order.

    Every expression is parsed before any task is examined, so one bad
    expression rejects the whole call.
    """
    criteria = [parse(e) for e in exprs]
    return [t for t in tasks if matches(t, criteria)]
