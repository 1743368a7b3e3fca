"""Score and rank actionable tasks to recommend what to work on next."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Mapping, Sequence

from tasktrack import filters, log
from tasktrack.config import DEFAULT_NEXT_LIMIT, ScoringWeights
from tasktrack.depth import DepthCalculator
from tasktrack.graph import Graph
from tasktrack.tasks.model import Effort, Priority, Status, Task

ACTIONABLE_STATUSES = frozenset({Status.PENDING.value, Status.IN_PROGRESS.value})


@dataclass
class Recommendation:
    rank: int
    id: str
    title: str
    file_path: str
    status: str
    priority: str
    effort: str
    score: int
    reasons: list[str]
    downstream_count: int
    on_critical_path: bool

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rank": self.rank,
            "id": self.id,
            "title": self.title,
            "file_path": self.file_path,
            "status": self.status,
            "priority": self.priority,
        }
        if self.effort:
            data["effort"] = self.effort
        data.update(
            score=self.score,
            reasons=list(self.reasons),
            downstream_count=self.downstream_count,
            on_critical_path=self.on_critical_path,
        )
        return data


@dataclass
class RecommendOptions:
    filters: list[str] = field(default_factory=list)
    quick_wins: bool = False
    critical: bool = False
    limit: int = DEFAULT_NEXT_LIMIT
    weights: ScoringWeights = field(default_factory=ScoringWeights)


@dataclass
class ScoredTask:
    task: Task
    score: int
    reasons: list[str]


# ── actionability ────────────────────────────────────────────────────


def is_actionable(task: Task, task_map: Mapping[str, Task]) -> bool:
    """Pending/in-progress with every resolvable dependency completed.

    Dependency ids that match no task count as satisfied.
    """
    if task.status not in ACTIONABLE_STATUSES:
        return False
    for dep_id in task.dependencies:
        dep = task_map.get(dep_id)
        if dep is not None and dep.status != Status.COMPLETED.value:
            return False
    return True


# ── scoring ──────────────────────────────────────────────────────────


def score_task(
    task: Task,
    critical_path: Collection[str],
    downstream_counts: Mapping[str, int],
    weights: ScoringWeights | None = None,
) -> tuple[int, list[str]]:
    """Return ``(score, reasons)`` for *task*."""
    w = weights or ScoringWeights()
    score = 0
    reasons: list[str] = []

    if task.priority == Priority.CRITICAL:
        score += w.priority_critical
        reasons.append("critical priority")
    elif task.priority == Priority.HIGH:
        score += w.priority_high
        reasons.append("high priority")
    elif task.priority == Priority.MEDIUM:
        score += w.priority_medium
    else:
        score += w.priority_low

    if task.id in critical_path:
        score += w.critical_path
        reasons.append("on critical path")

    count = downstream_counts.get(task.id, 0)
    score += min(count * w.per_downstream, w.downstream_max)
    if count > 0:
        noun = "task" if count == 1 else "tasks"
        reasons.append(f"unblocks {count} {noun}")

    if task.effort == Effort.SMALL:
        score += w.effort_small
        reasons.append("quick win")
    elif task.effort == Effort.MEDIUM:
        score += w.effort_medium
    elif task.effort == Effort.LARGE:
        score += w.effort_large

    return score, reasons


def sort_key(item: ScoredTask) -> tuple[int, str]:
    """Score descending, then id ascending."""
    return (-item.score, item.task.id)


@dataclass
class Analysis:
    """Whole-set facts every ranking needs, computed once per call."""

    task_map: dict[str, Task]
    critical_path: set[str]
    downstream_counts: dict[str, int]

    @classmethod
    def of(cls, tasks: Sequence[Task]) -> "Analysis":
        g = Graph(tasks)
        return cls(
            task_map=g.task_map(),
            critical_path=DepthCalculator(tasks).critical_path(),
            downstream_counts=g.downstream_counts(),
        )


def actionable_tasks(
    tasks: Sequence[Task],
    filter_exprs: Sequence[str],
    analysis: Analysis,
) -> list[Task]:
    """Apply field filters, then keep actionable tasks, preserving input order."""
    candidates = filters.apply(tasks, filter_exprs) if filter_exprs else list(tasks)
    return [t for t in candidates if is_actionable(t, analysis.task_map)]


def rank(tasks: Sequence[Task], analysis: Analysis, weights: ScoringWeights) -> list[ScoredTask]:
    """Score every task and sort by score descending, id ascending."""
    scored = []
    for task in tasks:
        s, reasons = score_task(task, analysis.critical_path, analysis.downstream_counts, weights)
        scored.append(ScoredTask(task=task, score=s, reasons=reasons))
    scored.sort(key=sort_key)
    return scored


# ── recommend ────────────────────────────────────────────────────────


def recommend(tasks: Sequence[Task], options: RecommendOptions | None = None) -> list[Recommendation]:
    """Rank actionable tasks and return the top ``options.limit``.

    Raises :class:`~tasktrack.errors.FilterError` for a bad filter expression.
    """
    opts = options or RecommendOptions()
    limit = opts.limit if opts.limit > 0 else DEFAULT_NEXT_LIMIT

    analysis = Analysis.of(tasks)
    actionable = actionable_tasks(tasks, opts.filters, analysis)

    if opts.quick_wins:
        actionable = [t for t in actionable if t.effort == Effort.SMALL]
    if opts.critical:
        actionable = [t for t in actionable if t.id in analysis.critical_path]

    scored = rank(actionable, analysis, opts.weights)

    log.debug(f"Recommend: {len(scored)} actionable candidate(s), limit {limit}")

    return [
        Recommendation(
            rank=i,
            id=st.task.id,
            title=st.task.title,
            file_path=st.task.file_path,
            status=st.task.status,
            priority=st.task.priority,
            effort=st.task.effort,
            score=st.score,
            reasons=st.reasons,
            downstream_count=analysis.downstream_counts.get(st.task.id, 0),
            on_critical_path=st.task.id in analysis.critical_path,
        )
        for i, st in enumerate(scored[:limit], start=1)
    ]
