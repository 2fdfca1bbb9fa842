"""Console output for workgraph, colored via Rich.

Messages are Rich markup; callers escape any user-supplied text.
"""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def _tagged(tag: str, style: str, msg: str) -> str:
    return f"[{style}]\\[{tag}][/{style}] {msg}"


def header(title: str) -> None:
    """Section heading used by the CLI reports."""
    console.print(f"[bold]>>> {title}[/bold]")


def info(msg: str) -> None:
    console.print(_tagged("INFO", "blue", msg))


def success(msg: str) -> None:
    console.print(_tagged("OK", "green", msg))


def warn(msg: str) -> None:
    console.print(_tagged("WARN", "yellow", msg))


def error(msg: str) -> None:
    _err_console.print(_tagged("ERROR", "red", msg))


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[dim]\\[DEBUG] {msg}[/dim]")
