"""Workflow validation: name, task IDs, flow endpoints and cycles."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.markup import escape

from workgraph import log
from workgraph.dag import find_cycles, is_dag, is_valid_task_id
from workgraph.delegation import has_unassigned_tasks
from workgraph.tasks.model import Workflow, WorkflowChecks


@dataclass
class ValidationResult:
    valid: bool
    messages: list[str] = field(default_factory=list)


def validate_workflow(workflow: Workflow) -> ValidationResult:
    """Collect every structural problem; never stops at the first one."""
    messages: list[str] = []

    if not workflow.workflow_name.strip():
        messages.append("Workflow name is required")

    if not workflow.tasks:
        messages.append("At least one task is required")

    task_ids: set[str] = set()
    for index, task in enumerate(workflow.tasks, start=1):
        if not is_valid_task_id(task.id):
            messages.append(f"Task {index} has invalid ID format: {task.id}")
        if task.id in task_ids:
            messages.append(f"Duplicate task ID: {task.id}")
        task_ids.add(task.id)

    for index, flow in enumerate(workflow.flows, start=1):
        for endpoint in (flow.from_id, flow.to_id):
            if endpoint not in task_ids:
                messages.append(f"Flow {index} references non-existent task: {endpoint}")

    if not is_dag(workflow.flows):
        cycles = ", ".join(" → ".join(cycle) for cycle in find_cycles(workflow.flows))
        messages.append(f"Workflow contains cycles: {cycles}")

    return ValidationResult(valid=not messages, messages=messages)


def compute_checks(workflow: Workflow, messages: list[str] | None = None) -> WorkflowChecks:
    """Fresh checks block; whatever the workflow already carries is ignored."""
    return WorkflowChecks(
        is_dag=is_dag(workflow.flows),
        has_unassigned=has_unassigned_tasks(workflow.tasks),
        messages=list(messages or []),
    )


def validate_and_report(workflow: Workflow) -> bool:
    """Validate and log each problem.  Returns ``True`` when valid."""
    result = validate_workflow(workflow)
    if result.valid:
        log.success(f"Workflow '{escape(workflow.workflow_name)}' is valid ({len(workflow.tasks)} tasks)")
        return True
    log.error(f"Workflow '{escape(workflow.workflow_name)}' has {len(result.messages)} problem(s):")
    for message in result.messages:
        log.error(f"  - {escape(message)}")
    return False
