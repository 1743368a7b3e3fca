"""Task dependency graph: adjacency, transitive queries, cycle detection."""

from __future__ import annotations

from typing import Any, Collection, Iterable

from tasktrack import log
from tasktrack.tasks.model import Task

_GRAY = 1
_BLACK = 2


class Graph:
    """Read-only dependency graph built once from a task list.

    Two adjacency maps are derived from ``Task.dependencies``:

    * ``blocks``: dependency id -> ids of tasks that depend on it
    * ``depends_on``: task id -> its own dependency ids

    Dependency ids that match no task are kept as edge endpoints but never
    resolve to a task.  The graph may contain cycles; every traversal here
    carries its own visited set and terminates regardless.

    Usage::

        g = Graph(tasks)
        g.downstream("001")     # everything 001 transitively blocks
        g.upstream("005")       # everything 005 transitively waits on
        g.detect_cycles()       # [["A", "C", "B"], ...]
    """

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._task_map: dict[str, Task] = {t.id: t for t in self._tasks}
        self._blocks: dict[str, list[str]] = {}
        self._depends_on: dict[str, list[str]] = {}

        for task in self._tasks:
            for dep_id in task.dependencies:
                self._blocks.setdefault(dep_id, []).append(task.id)
                self._depends_on.setdefault(task.id, []).append(dep_id)

        log.debug(
            f"Graph built: {len(self._tasks)} task(s), "
            f"{sum(len(v) for v in self._depends_on.values())} edge(s)"
        )

    # ── accessors ────────────────────────────────────────────────

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._task_map

    def get(self, task_id: str) -> Task | None:
        return self._task_map.get(task_id)

    def task_map(self) -> dict[str, Task]:
        """Return a fresh id -> Task mapping."""
        return dict(self._task_map)

    def blocks(self, task_id: str) -> list[str]:
        """Ids of tasks that directly depend on *task_id*."""
        return list(self._blocks.get(task_id, ()))

    def depends_on(self, task_id: str) -> list[str]:
        """Direct dependency ids of *task_id*, unknown ids included."""
        return list(self._depends_on.get(task_id, ()))

    # ── transitive queries ───────────────────────────────────────

    @staticmethod
    def _reach(start: str, adjacency: dict[str, list[str]]) -> set[str]:
        visited = {start}
        worklist = [start]
        while worklist:
            current = worklist.pop()
            for nxt in adjacency.get(current, ()):
                if nxt not in visited:
                    visited.add(nxt)
                    worklist.append(nxt)
        visited.discard(start)
        return visited

    def downstream(self, task_id: str) -> set[str]:
        """Every task id transitively blocked by *task_id*, excluding itself."""
        return self._reach(task_id, self._blocks)

    def upstream(self, task_id: str) -> set[str]:
        """Every id *task_id* transitively depends on, excluding itself."""
        return self._reach(task_id, self._depends_on)

    def downstream_counts(self) -> dict[str, int]:
        """Map each task id to the size of its downstream set."""
        return {t.id: len(self.downstream(t.id)) for t in self._tasks}

    # ── cycles ───────────────────────────────────────────────────

    def detect_cycles(self) -> list[list[str]]:
        """Return dependency cycles found by a white/gray/black DFS.

        Each cycle lists the path from the re-entered node to the node that
        closed the loop.  DFS entry points follow task order and dependency
        order, so the output is deterministic.  A cycle may be reported more
        than once when reached from different gray nodes.
        """
        cycles: list[list[str]] = []
        state: dict[str, int] = {}

        for task in self._tasks:
            if task.id in state:
                continue

            state[task.id] = _GRAY
            path = [task.id]
            stack = [iter(self._depends_on.get(task.id, ()))]

            while stack:
                dep_id = next(stack[-1], None)
                if dep_id is None:
                    stack.pop()
                    state[path.pop()] = _BLACK
                    continue
                if dep_id not in self._task_map:
                    continue

                seen = state.get(dep_id)
                if seen is None:
                    state[dep_id] = _GRAY
                    path.append(dep_id)
                    stack.append(iter(self._depends_on.get(dep_id, ())))
                elif seen == _GRAY:
                    cycle = path[path.index(dep_id):]
                    log.debug(f"Cycle detected: {' -> '.join(cycle + [dep_id])}")
                    cycles.append(cycle)

        return cycles

    # ── subgraphs ────────────────────────────────────────────────

    def filter_tasks(self, task_ids: Collection[str]) -> Graph:
        """New graph over only the tasks in *task_ids*; edges are rebuilt."""
        return Graph(t for t in self._tasks if t.id in task_ids)

    # ── serialization ────────────────────────────────────────────

    def sorted_tasks(self) -> list[Task]:
        return sorted(self._tasks, key=lambda t: t.id)

    def edges(self) -> list[tuple[str, str]]:
        """Unique ``(dependency, task)`` pairs between tasks in this graph, in sorted task order."""
        seen: set[tuple[str, str]] = set()
        out: list[tuple[str, str]] = []
        for task in self.sorted_tasks():
            for dep_id in task.dependencies:
                if dep_id not in self._task_map:
                    continue
                edge = (dep_id, task.id)
                if edge not in seen:
                    seen.add(edge)
                    out.append(edge)
        return out

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready ``{nodes, edges[, cycles]}`` structure."""
        nodes: list[dict[str, Any]] = []
        for task in self.sorted_tasks():
            node: dict[str, Any] = {
                "id": task.id,
                "title": task.title,
                "status": task.status,
            }
            if task.priority:
                node["priority"] = task.priority
            if task.group:
                node["group"] = task.group
            nodes.append(node)

        result: dict[str, Any] = {
            "nodes": nodes,
            "edges": [{"from": a, "to": b} for a, b in self.edges()],
        }
        cycles = self.detect_cycles()
        if cycles:
            result["cycles"] = cycles
        return result
