"""Console reports for the command line."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from rich.table import Table

from workgraph import log
from workgraph.delegation import NOTE_MARKER
from workgraph.tasks.model import Task, WorkflowChecks


def _last_delegation_line(notes: str | None) -> str:
    for line in reversed((notes or "").split("\n")):
        if NOTE_MARKER in line:
            return line.replace(NOTE_MARKER, "").strip()
    return ""


def show_checks(checks: WorkflowChecks) -> None:
    log.header("Checks")
    log.console.print(f"DAG:            {'yes' if checks.is_dag else '[red]no[/red]'}")
    log.console.print(f"Unassigned:     {'[yellow]yes[/yellow]' if checks.has_unassigned else 'no'}")
    for message in checks.messages:
        log.console.print(f"  - {escape(message)}")


def show_assignments(before: Sequence[Task], after: Sequence[Task]) -> None:
    """Table of who each task went to, marking the ones that changed."""
    table = Table(title="Assignments")
    table.add_column("Task")
    table.add_column("Assignee")
    table.add_column("Role")
    table.add_column("Decision")

    for old, new in zip(before, after):
        changed = old.assignee != new.assignee
        who = escape(new.assignee.name or "-")
        table.add_row(
            escape(new.id),
            f"[green]{who}[/green]" if changed else who,
            escape(new.assignee.role or ""),
            escape(_last_delegation_line(new.notes)) if changed or old.notes != new.notes else "[dim]kept[/dim]",
        )
    log.console.print(table)


def show_status_changes(rows: Sequence[tuple[str, str, str]]) -> None:
    """Rows are ``(id, before, after)``."""
    table = Table(title="Statuses")
    table.add_column("Node")
    table.add_column("Before")
    table.add_column("After")
    for node_id, before, after in rows:
        after_cell = f"[green]{after}[/green]" if after != before else after
        table.add_row(escape(node_id), before, after_cell)
    log.console.print(table)


def show_order(order: Sequence[str]) -> None:
    log.header("Execution order")
    for index, task_id in enumerate(order, start=1):
        log.console.print(f"  {index:>3}. {escape(task_id)}")
