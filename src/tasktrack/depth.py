"""Longest-chain depth and critical-path membership for a task set."""

from __future__ import annotations

from typing import Iterable

from tasktrack import log
from tasktrack.tasks.model import Task


class DepthCalculator:
    """Memoized dependency depth over one task set.

    ``depth(t) = 1 + max(depth(d) for existing dependencies d)``, so a task
    with no resolvable dependencies has depth 1.  A dependency that is
    already being computed further up the current chain contributes 0,
    which truncates cycles instead of rejecting them.  Results are cached
    per instance only.
    """

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._task_map: dict[str, Task] = {t.id: t for t in self._tasks}
        self._memo: dict[str, int] = {}
        self._computed_all = False

    def depth(self, task_id: str) -> int:
        """Depth of *task_id*; 0 for an id that matches no task."""
        if task_id in self._memo:
            return self._memo[task_id]
        task = self._task_map.get(task_id)
        if task is None:
            return 0

        # Explicit frames [id, dependency iterator, best depth so far]
        guard = {task_id}
        stack: list[list] = [[task_id, iter(task.dependencies), 0]]
        while stack:
            frame = stack[-1]
            dep_id = next(frame[1], None)
            if dep_id is None:
                stack.pop()
                guard.discard(frame[0])
                value = frame[2] + 1
                self._memo[frame[0]] = value
                if stack:
                    stack[-1][2] = max(stack[-1][2], value)
                continue

            if dep_id in self._memo:
                contribution = self._memo[dep_id]
            elif dep_id in guard or dep_id not in self._task_map:
                contribution = 0
            else:
                guard.add(dep_id)
                stack.append([dep_id, iter(self._task_map[dep_id].dependencies), 0])
                continue
            frame[2] = max(frame[2], contribution)

        return self._memo[task_id]

    def depth_map(self) -> dict[str, int]:
        """Depth of every task, computed in task order."""
        if not self._computed_all:
            for task in self._tasks:
                self.depth(task.id)
            self._computed_all = True
        return {t.id: self._memo[t.id] for t in self._tasks}

    def max_depth(self) -> int:
        return max(self.depth_map().values(), default=0)

    def critical_path(self) -> set[str]:
        """Ids lying on some maximal-depth chain.

        Seeds with every task at the global maximum depth, then walks back
        through dependencies whose depth is exactly one less.  Depth strictly
        decreases along the walk, so it terminates on cyclic input too.
        """
        depths = self.depth_map()
        top = max(depths.values(), default=0)

        critical: set[str] = set()
        worklist = [tid for tid, d in depths.items() if d == top]
        critical.update(worklist)
        while worklist:
            task_id = worklist.pop()
            target = depths[task_id] - 1
            for dep_id in self._task_map[task_id].dependencies:
                if dep_id in critical or dep_id not in self._task_map:
                    continue
                if depths[dep_id] == target:
                    critical.add(dep_id)
                    worklist.append(dep_id)

        log.debug(f"Critical path: {len(critical)} task(s) at max depth {top}")
        return critical


def critical_path_tasks(tasks: Iterable[Task]) -> set[str]:
    return DepthCalculator(tasks).critical_path()
