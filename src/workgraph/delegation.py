"""Auto delegation of workflow tasks to team members."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from rich.markup import escape

from workgraph import log
from workgraph.scoring import rank_candidates
from workgraph.skills import infer_required_skillset
from workgraph.tasks.model import Assignee, Candidate, Task

NOTE_MARKER = "[Auto Delegate]"
NO_ASSIGNEES_NOTE = f"{NOTE_MARKER} No assignees available."

LOW_CONFIDENCE_THRESHOLD = 0.05


def _append_note(notes: str | None, line: str) -> str:
    return f"{notes}\n{line}" if notes else line


def strip_delegation_notes(notes: str | None) -> str:
    """Drop every line written by a previous delegation pass."""
    lines = (notes or "").split("\n")
    return "\n".join(line for line in lines if NOTE_MARKER not in line).strip()


def confidence_label(score: float) -> str:
    if score < LOW_CONFIDENCE_THRESHOLD:
        return "low confidence - please review"
    # Half-up, so 12.5 reads as 13%.
    return f"{int(score * 100 + 0.5)}% confidence"


def delegate_task(task: Task, candidates: Sequence[Candidate], *, force_reassign: bool = False) -> Task:
    """Assign *task* to its best-ranked candidate and return the updated copy.

    *candidates* must not be empty.
    """
    notes = strip_delegation_notes(task.notes) if force_reassign else (task.notes or "")

    ranked = rank_candidates(candidates, task)
    log.debug(escape(f'Task {task.id} "{task.name}": required skills {sorted(infer_required_skillset(task))}'))
    for entry in ranked:
        log.debug(escape(f"  - {entry.candidate.name} ({entry.candidate.role}): score {entry.score:.3f}"))

    best = ranked[0]
    log.debug(escape(f"  -> best match: {best.candidate.name} (score {best.score:.3f})"))

    line = f"{NOTE_MARKER} Assigned to {best.candidate.name} ({confidence_label(best.score)})"
    return replace(
        task,
        assignee=Assignee.from_candidate(best.candidate),
        notes=_append_note(notes, line),
    )


def auto_delegate(
    tasks: Sequence[Task],
    candidates: Sequence[Candidate],
    force_reassign: bool = False,
) -> list[Task]:
    """Return a new task list with unassigned tasks delegated.

    With *force_reassign*, every task is re-delegated and earlier
    ``[Auto Delegate]`` note lines are replaced.  The input list and its
    tasks are left untouched.
    """
    if not candidates:
        log.warn("No assignees available for auto delegation")
        return [
            task if task.assignee.is_assigned
            else replace(task, notes=_append_note(task.notes, NO_ASSIGNEES_NOTE))
            for task in tasks
        ]

    delegated: list[Task] = []
    for task in tasks:
        if task.assignee.is_assigned and not force_reassign:
            delegated.append(task)
            continue
        delegated.append(delegate_task(task, candidates, force_reassign=force_reassign))
    return delegated


def has_unassigned_tasks(tasks: Sequence[Task]) -> bool:
    return any(not task.assignee.is_assigned for task in tasks)
