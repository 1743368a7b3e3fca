"""Group actionable tasks into parallel tracks by touch-scope overlap.

Tasks are considered in recommendation order (score descending, id
ascending) and placed first-fit: a task joins the first track whose claimed
scopes share nothing with its own ``touches``, otherwise it opens a new
track.  Tasks without ``touches`` never conflict and are reported as
*flexible* instead of being placed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from tasktrack import log
from tasktrack.config import ScoringWeights
from tasktrack.recommend import Analysis, ScoredTask, actionable_tasks, rank
from tasktrack.tasks.model import Task


@dataclass
class TrackTask:
    id: str
    title: str
    priority: str
    effort: str
    score: int
    file_path: str
    touches: list[str]

    @classmethod
    def from_scored(cls, item: ScoredTask) -> "TrackTask":
        t = item.task
        return cls(
            id=t.id,
            title=t.title,
            priority=t.priority,
            effort=t.effort,
            score=item.score,
            file_path=t.file_path,
            touches=list(t.touches),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.priority:
            data["priority"] = self.priority
        if self.effort:
            data["effort"] = self.effort
        data["score"] = self.score
        data["file_path"] = self.file_path
        if self.touches:
            data["touches"] = list(self.touches)
        return data


@dataclass
class Track:
    id: int
    tasks: list[TrackTask] = field(default_factory=list)
    scopes: list[str] = field(default_factory=list)
    _claimed: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def overlaps(self, touches: Sequence[str]) -> bool:
        return any(scope in self._claimed for scope in touches)

    def add(self, item: TrackTask) -> None:
        self.tasks.append(item)
        for scope in item.touches:
            if scope not in self._claimed:
                self._claimed.add(scope)
                self.scopes.append(scope)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tasks": [t.to_dict() for t in self.tasks],
            "scopes": list(self.scopes),
        }


@dataclass
class TrackResult:
    tracks: list[Track] = field(default_factory=list)
    flexible: list[TrackTask] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tracks": [t.to_dict() for t in self.tracks],
            "flexible": [t.to_dict() for t in self.flexible],
        }
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


@dataclass
class TrackOptions:
    filters: list[str] = field(default_factory=list)
    # None disables unknown-scope warnings
    known_scopes: set[str] | None = None
    weights: ScoringWeights = field(default_factory=ScoringWeights)


def unknown_scope_warnings(items: Sequence[ScoredTask], known_scopes: set[str] | None) -> list[str]:
    """One warning per distinct unknown scope, in first-seen order."""
    if known_scopes is None:
        return []
    warnings: list[str] = []
    seen: set[str] = set()
    for item in items:
        for scope in item.task.touches:
            if scope not in known_scopes and scope not in seen:
                seen.add(scope)
                warnings.append(f"unknown scope: {scope}")
    return warnings


def assign_tracks(items: Sequence[ScoredTask]) -> list[Track]:
    """Greedy first-fit placement of *items* (already sorted) into tracks."""
    tracks: list[Track] = []
    for item in items:
        touches = item.task.touches
        target = next((t for t in tracks if not t.overlaps(touches)), None)
        if target is None:
            target = Track(id=len(tracks) + 1)
            tracks.append(target)
            log.debug(f"Track {target.id} opened for {item.task.id}")
        target.add(TrackTask.from_scored(item))
    return tracks


def assign(tasks: Sequence[Task], options: TrackOptions | None = None) -> TrackResult:
    """Partition actionable tasks into scope-disjoint tracks plus flexible tasks.

    Raises :class:`~tasktrack.errors.FilterError` for a bad filter expression.
    """
    opts = options or TrackOptions()

    analysis = Analysis.of(tasks)
    items = rank(actionable_tasks(tasks, opts.filters, analysis), analysis, opts.weights)

    with_touches = [it for it in items if it.task.touches]
    flexible = [it for it in items if not it.task.touches]
    tracks = assign_tracks(with_touches)

    log.debug(
        f"Tracks: {len(tracks)} track(s) for {len(with_touches)} task(s), "
        f"{len(flexible)} flexible"
    )

    return TrackResult(
        tracks=tracks,
        flexible=[TrackTask.from_scored(it) for it in flexible],
        warnings=unknown_scope_warnings(items, opts.known_scopes),
    )
