"""tasktrack CLI: recommendations, parallel tracks and dependency graphs.

Installed as the ``tasktrack`` console_script.
"""

from __future__ import annotations

import functools
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import click
import yaml
from rich.markup import escape
from rich.table import Table

from tasktrack import __version__, log
from tasktrack.config import Config, load_config
from tasktrack.errors import TaskTrackError
from tasktrack.graph import Graph
from tasktrack.io_utils import write_text
from tasktrack.recommend import RecommendOptions, recommend
from tasktrack.render import to_ascii, to_dot, to_mermaid
from tasktrack.tasks.io import load_task_file
from tasktrack.tasks.model import Task
from tasktrack.tracks import TrackOptions, TrackResult, assign


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

GRAPH_FORMATS = ("mermaid", "dot", "ascii", "json")
LIST_FORMATS = ("table", "json", "yaml")


def _fail(msg: str) -> None:
    log.error(msg)
    sys.exit(1)


def _reports_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Report TaskTrackError through log.error and exit with status 1."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except TaskTrackError as e:
            _fail(str(e))

    return wrapper


def _load(ctx: click.Context) -> tuple[Config, list[Task]]:
    """Resolve config from the task file's directory and load the tasks."""
    params = ctx.find_root().params
    tasks_file: str = params.get("tasks_file") or ""
    base_dir = Path(tasks_file).parent if tasks_file else Path.cwd()

    # -v forces verbose on; without it the config file decides
    cfg = load_config(base_dir, tasks_file=tasks_file or None, verbose=params.get("verbose") or None)
    log.set_verbose(cfg.verbose)
    path = Path(cfg.tasks_file)
    if not tasks_file and not path.is_absolute():
        path = base_dir / path

    tf = load_task_file(path)
    log.debug(f"Using {path} ({len(tf.tasks)} tasks)")
    return cfg, tf.tasks


def _dump(data: Any, fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)


# ── Root group ────────────────────────────────────────────────────────


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-f", "--file", "tasks_file", default="", help="Task file (default: tasks.yaml or $TASKTRACK_TASKS_FILE)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="tasktrack")
def main(tasks_file: str, verbose: bool) -> None:
    """tasktrack: plan work over a task dependency graph.

    Reads tasks from a YAML file and answers three questions: what to work
    on next, which tasks can proceed in parallel without touching the same
    areas, and how the dependency graph looks.

    \b
    EXAMPLES:
      tasktrack next                          # Top 5 recommendations
      tasktrack next --quick-wins --limit 3   # Small tasks only
      tasktrack tracks --format json          # Parallel tracks as JSON
      tasktrack graph --root 004 --format ascii
      tasktrack -f plan/tasks.yaml cycles
    """
    log.set_verbose(verbose)


# ── next ──────────────────────────────────────────────────────────────


@main.command("next")
@click.option("--limit", type=int, default=None, help="Maximum number of recommendations")
@click.option("--filter", "filter_exprs", multiple=True, help="Filter tasks (e.g. --filter priority=high)")
@click.option("--quick-wins", is_flag=True, help="Only small-effort tasks")
@click.option("--critical", is_flag=True, help="Only tasks on the critical path")
@click.option("--format", "fmt", type=click.Choice(LIST_FORMATS), default="table", show_default=True)
@click.pass_context
@_reports_errors
def next_cmd(
    ctx: click.Context,
    limit: int | None,
    filter_exprs: tuple[str, ...],
    quick_wins: bool,
    critical: bool,
    fmt: str,
) -> None:
    """Recommend what to work on next.

    Only actionable tasks are considered: pending or in-progress with every
    dependency completed.  Tasks are ranked by priority, critical-path
    membership, how many tasks they unblock, and effort.
    """
    cfg, tasks = _load(ctx)
    recs = recommend(
        tasks,
        RecommendOptions(
            filters=list(filter_exprs),
            quick_wins=quick_wins,
            critical=critical,
            limit=limit if limit is not None else cfg.next_limit,
            weights=cfg.weights,
        ),
    )

    if fmt != "table":
        _dump([r.to_dict() for r in recs], fmt)
        return

    if not recs:
        log.console.print("No actionable tasks found.")
        return

    table = Table(show_edge=False, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Score", justify="right")
    table.add_column("Why")
    for r in recs:
        table.add_row(
            str(r.rank),
            escape(r.id),
            escape(r.title),
            escape(r.priority or "-"),
            str(r.score),
            escape(", ".join(r.reasons)),
        )
    log.console.print(table)


# ── tracks ────────────────────────────────────────────────────────────


def _print_tracks(result: TrackResult) -> None:
    if not result.tracks and not result.flexible:
        log.console.print("No actionable tasks found.")
        return

    for w in result.warnings:
        log.warn(w)

    def task_table(rows: list) -> Table:
        table = Table(show_header=False, show_edge=False, box=None, pad_edge=False)
        table.add_column(justify="right")
        table.add_column(style="cyan", no_wrap=True)
        table.add_column()
        table.add_column()
        for i, t in enumerate(rows, start=1):
            table.add_row(f"  {i}.", escape(t.id), escape(t.title), escape(t.priority))
        return table

    for track in result.tracks:
        log.console.print(f"[bold]Track {track.id} ({escape(', '.join(track.scopes))}):[/bold]")
        log.console.print(task_table(track.tasks))
        log.console.print()

    if result.flexible:
        log.console.print("[bold]Flexible (no declared overlaps):[/bold]")
        log.console.print(task_table(result.flexible))


@main.command("tracks")
@click.option("--filter", "filter_exprs", multiple=True, help="Filter tasks (e.g. --filter tag=cli)")
@click.option("--limit", type=int, default=0, help="Maximum number of tracks to show (0 = unlimited)")
@click.option("--format", "fmt", type=click.Choice(LIST_FORMATS), default="table", show_default=True)
@click.pass_context
@_reports_errors
def tracks_cmd(ctx: click.Context, filter_exprs: tuple[str, ...], limit: int, fmt: str) -> None:
    """Group actionable tasks into parallel tracks by ``touches`` overlap.

    Tasks sharing a scope land in different tracks so they can be worked on
    side by side without conflicts.  Tasks without ``touches`` are listed as
    flexible.  Scopes declared under ``scopes:`` in .tasktrack.yaml enable
    warnings for unknown scope names.
    """
    cfg, tasks = _load(ctx)
    result = assign(
        tasks,
        TrackOptions(
            filters=list(filter_exprs),
            known_scopes=cfg.known_scopes(),
            weights=cfg.weights,
        ),
    )
    if limit > 0:
        result.tracks = result.tracks[:limit]

    if fmt != "table":
        _dump(result.to_dict(), fmt)
        return
    _print_tracks(result)


# ── graph ─────────────────────────────────────────────────────────────


def _exclude_statuses(tasks: list[Task], statuses: tuple[str, ...]) -> list[Task]:
    """Drop tasks in *statuses* and prune dependency ids that pointed at them."""
    dropped = {t.id for t in tasks if t.status in statuses}
    kept = [t for t in tasks if t.id not in dropped]
    return [
        replace(t, dependencies=[d for d in t.dependencies if d not in dropped])
        for t in kept
    ]


@main.command("graph")
@click.option("--format", "fmt", type=click.Choice(GRAPH_FORMATS), default="mermaid", show_default=True)
@click.option("--root", default="", help="Start graph from a specific task ID")
@click.option("--focus", default="", help="Highlight a specific task ID")
@click.option("--upstream", is_flag=True, help="With --root: only its dependencies")
@click.option("--downstream", is_flag=True, help="With --root: only its dependents")
@click.option("--exclude-status", "exclude_status", multiple=True, help="Drop tasks with this status")
@click.option("--out", "-o", "out", default="", help="Write output to a file instead of stdout")
@click.pass_context
@_reports_errors
def graph_cmd(
    ctx: click.Context,
    fmt: str,
    root: str,
    focus: str,
    upstream: bool,
    downstream: bool,
    exclude_status: tuple[str, ...],
    out: str,
) -> None:
    """Export the dependency graph (mermaid, dot, ascii, json)."""
    if upstream and downstream:
        raise click.UsageError("Choose only one of --upstream / --downstream.")
    if (upstream or downstream) and not root:
        raise click.UsageError("--upstream and --downstream require --root.")

    _, tasks = _load(ctx)
    if exclude_status:
        tasks = _exclude_statuses(tasks, exclude_status)

    g = Graph(tasks)
    if root:
        if root not in g:
            _fail(f"root task {root} not found")
        if downstream:
            keep = g.downstream(root)
        elif upstream:
            keep = g.upstream(root)
        else:
            keep = g.upstream(root) | g.downstream(root)
        keep.add(root)
        g = g.filter_tasks(keep)

    if focus and focus not in g:
        _fail(f"focus task {focus} not found")

    if fmt == "mermaid":
        output = to_mermaid(g, focus)
    elif fmt == "dot":
        output = to_dot(g, focus)
    elif fmt == "ascii":
        output = to_ascii(g, root, downstream=not upstream)
    else:
        output = json.dumps(g.to_dict(), indent=2, ensure_ascii=False) + "\n"

    if out:
        write_text(out, output, make_parents=True)
        log.success(f"Graph written to {out}")
    else:
        click.echo(output, nl=False)


# ── cycles ────────────────────────────────────────────────────────────


@main.command("cycles")
@click.option("--format", "fmt", type=click.Choice(("table", "json")), default="table", show_default=True)
@click.pass_context
@_reports_errors
def cycles_cmd(ctx: click.Context, fmt: str) -> None:
    """List dependency cycles. Exits with status 1 when any exist."""
    _, tasks = _load(ctx)
    cycles = Graph(tasks).detect_cycles()

    if fmt == "json":
        _dump({"cycles": cycles}, "json")
    elif not cycles:
        log.console.print("No cycles found.")
    else:
        for i, cycle in enumerate(cycles, start=1):
            loop = " -> ".join(cycle + cycle[:1])
            log.console.print(f"Cycle {i}: {escape(loop)}")

    if cycles:
        ctx.exit(1)
