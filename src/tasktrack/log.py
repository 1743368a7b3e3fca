"""Console output for the CLI and engine, via Rich.

Command output and ``success`` go to stdout; warnings, errors and debug
lines go to stderr so ``--format json`` output stays parseable.  Messages
carry task ids, titles and YAML error text, so they are printed literally
rather than parsed as Rich markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def success(msg: str) -> None:
    console.print(f"[green]\\[OK][/green] {escape(msg)}")


def warn(msg: str) -> None:
    _err_console.print(f"[yellow]\\[WARN][/yellow] {escape(msg)}")


def error(msg: str) -> None:
    _err_console.print(f"[red]\\[ERROR][/red] {escape(msg)}")


def debug(msg: str) -> None:
    if _verbose:
        _err_console.print(f"[dim]\\[DEBUG] {escape(msg)}[/dim]")
