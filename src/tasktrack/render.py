"""Text renderings of a task Graph: Mermaid, Graphviz DOT, ASCII tree."""

from __future__ import annotations

from tasktrack.graph import Graph
from tasktrack.tasks.model import Status

_MERMAID_CLASSES = {
    Status.COMPLETED.value: "completed",
    Status.IN_PROGRESS.value: "inprogress",
    Status.BLOCKED.value: "blocked",
}

_MERMAID_STYLES = (
    "    classDef focus fill:#ff6b6b,stroke:#c92a2a,color:#fff",
    "    classDef completed fill:#51cf66,stroke:#2f9e44,color:#000",
    "    classDef inprogress fill:#ffd43b,stroke:#fab005,color:#000",
    "    classDef blocked fill:#868e96,stroke:#495057,color:#fff",
)

_DOT_COLORS = {
    Status.COMPLETED.value: "lightgreen",
    Status.IN_PROGRESS.value: "yellow",
    Status.BLOCKED.value: "gray",
}

_ASCII_MARKS = {
    Status.COMPLETED.value: " ✓",
    Status.IN_PROGRESS.value: " ⋯",
    Status.BLOCKED.value: " ⊗",
}


def to_mermaid(graph: Graph, focus: str = "") -> str:
    lines = ["graph TD"]
    for task in graph.sorted_tasks():
        if task.id == focus:
            style = ":::focus"
        elif task.status in _MERMAID_CLASSES:
            style = f":::{_MERMAID_CLASSES[task.status]}"
        else:
            style = ""
        title = task.title.replace('"', "&quot;")
        lines.append(f'    {task.id}["{task.id}: {title}"]{style}')

    for dep_id, task_id in graph.edges():
        lines.append(f"    {dep_id} --> {task_id}")

    lines.append("")
    lines.extend(_MERMAID_STYLES)
    return "\n".join(lines) + "\n"


def to_dot(graph: Graph, focus: str = "") -> str:
    lines = [
        "digraph tasks {",
        "    rankdir=TB;",
        "    node [shape=box, style=rounded];",
        "",
    ]
    for task in graph.sorted_tasks():
        color = "red" if task.id == focus else _DOT_COLORS.get(task.status, "lightgray")
        title = task.title.replace('"', '\\"')
        lines.append(
            f'    "{task.id}" [label="{task.id}: {title}", fillcolor={color}, style=filled];'
        )

    lines.append("")
    for dep_id, task_id in graph.edges():
        lines.append(f'    "{dep_id}" -> "{task_id}";')

    lines.append("}")
    return "\n".join(lines) + "\n"


def _ascii_roots(graph: Graph, downstream: bool) -> list[str]:
    if downstream:
        roots = [t.id for t in graph.tasks if not t.dependencies]
    else:
        roots = [t.id for t in graph.tasks if not graph.blocks(t.id)]
    if not roots:
        # Every task sits on a cycle; show them all
        roots = [t.id for t in graph.tasks]
    return sorted(roots)


def to_ascii(graph: Graph, root: str = "", downstream: bool = True) -> str:
    """Indented dependency tree.

    Walks dependents when *downstream* is true, dependencies otherwise.
    A node met a second time is listed with ``(see above)`` and not expanded.
    """
    out: list[str] = []
    visited: set[str] = set()

    # Explicit stack of (task id, prefix, is_last, is_top)
    def walk(start: str) -> None:
        stack = [(start, "", True, True)]
        while stack:
            task_id, prefix, is_last, is_top = stack.pop()
            task = graph.get(task_id)
            if task is None:
                continue
            connector = "└── " if is_last else "├── "

            if task_id in visited:
                out.append(f"{prefix}{connector}[{task_id}] {task.title} (see above)")
                continue
            visited.add(task_id)

            mark = _ASCII_MARKS.get(task.status, "")
            if is_top:
                out.append(f"[{task_id}] {task.title}{mark}")
                child_prefix = ""
            else:
                out.append(f"{prefix}{connector}[{task_id}] {task.title}{mark}")
                child_prefix = prefix + ("    " if is_last else "│   ")

            linked = graph.blocks(task_id) if downstream else graph.depends_on(task_id)
            children = sorted(c for c in linked if c in graph)
            for i in reversed(range(len(children))):
                stack.append((children[i], child_prefix, i == len(children) - 1, False))

    roots = [root] if root else _ascii_roots(graph, downstream)
    for i, root_id in enumerate(roots):
        if i:
            out.append("")
        walk(root_id)

    return "\n".join(out) + ("\n" if out else "")
