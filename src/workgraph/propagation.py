"""Status propagation over the workflow graph.

Each node moves ``pending -> progress -> completed``; ``done`` is only set
by an explicit :func:`mark_done`.  One call is one synchronous pass: every
node is judged against the statuses as they were *before* the pass, so a
change never ripples downstream within the same call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from rich.markup import escape

from workgraph import log
from workgraph.dag import predecessors
from workgraph.tasks.model import Flow, NodeStatus, Workflow, WorkflowEdge, WorkflowNode


def next_status(
    status: NodeStatus,
    output: str,
    preds: Sequence[str],
    snapshot: dict[str, NodeStatus | None],
) -> NodeStatus:
    """Return the status a node should hold given its predecessors and output."""
    if status == NodeStatus.PENDING:
        if not preds or all(snapshot.get(p) == NodeStatus.DONE for p in preds):
            return NodeStatus.PROGRESS
    elif status == NodeStatus.PROGRESS and output.strip():
        return NodeStatus.COMPLETED
    return status


def update_node_statuses(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
) -> list[WorkflowNode]:
    """Run one propagation pass and return new node records."""
    snapshot = {node.id: node.status for node in nodes}
    preds = predecessors(Flow(e.source, e.target) for e in edges)

    updated: list[WorkflowNode] = []
    for node in nodes:
        if node.status is None:
            updated.append(node)
            continue
        status = next_status(node.status, node.output, preds.get(node.id, []), snapshot)
        if status != node.status:
            log.debug(f"Node {escape(node.id)}: {node.status.value} -> {status.value}")
            node = replace(node, status=status)
        updated.append(node)
    return updated


def mark_done(nodes: Sequence[WorkflowNode], node_id: str) -> list[WorkflowNode]:
    """Return new node records with *node_id* set to ``done``."""
    if not any(node.id == node_id for node in nodes):
        raise KeyError(node_id)
    return [
        replace(node, status=NodeStatus.DONE) if node.id == node_id else node
        for node in nodes
    ]


def propagate_workflow(workflow: Workflow) -> Workflow:
    """Apply one propagation pass to a task/flow workflow."""
    snapshot = {task.id: task.status.to_node() for task in workflow.tasks}
    preds = predecessors(workflow.flows)

    tasks = []
    for task in workflow.tasks:
        current = task.status.to_node()
        output = "\n".join(o for o in task.output if o.strip())
        status = next_status(current, output, preds.get(task.id, []), snapshot)
        if status != current:
            log.debug(f"Task {escape(task.id)}: {task.status.value} -> {status.to_task().value}")
            task = replace(task, status=status.to_task())
        tasks.append(task)
    return replace(workflow, tasks=tasks)
