"""Load and save workflow, candidate and graph documents (JSON or YAML)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from workgraph.errors import InvalidDocumentError
from workgraph.io_utils import PathLike, read_document, write_document
from workgraph.tasks.model import Candidate, Workflow, WorkflowEdge, WorkflowNode


def load_workflow(path: PathLike) -> Workflow:
    """Load a ``{workflow_name, tasks, flows, checks}`` document."""
    data = read_document(path)
    # Accept the envelope a generator response comes in.
    if isinstance(data, dict) and "workflow" in data and "tasks" not in data:
        data = data["workflow"]
    return Workflow.from_dict(data)


def save_workflow(workflow: Workflow, path: PathLike) -> None:
    write_document(path, workflow.to_dict())


def parse_candidates(data: Any) -> list[Candidate]:
    """Accept a bare list or ``{"assignees": [...]}``."""
    if isinstance(data, dict):
        data = data.get("assignees", data.get("assignee_list"))
    if not isinstance(data, list):
        raise InvalidDocumentError("assignee list must be a list of {name, email, role}")
    return [Candidate.from_dict(item) for item in data]


def load_candidates(path: PathLike) -> list[Candidate]:
    return parse_candidates(read_document(path))


def is_graph_document(data: Any) -> bool:
    return isinstance(data, dict) and "nodes" in data


def parse_graph(data: Any) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    if not is_graph_document(data):
        raise InvalidDocumentError("graph document requires a 'nodes' list")
    nodes = data.get("nodes") or []
    edges = data.get("edges") or []
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise InvalidDocumentError("'nodes' and 'edges' must be lists")
    return [WorkflowNode.from_dict(n) for n in nodes], [WorkflowEdge.from_dict(e) for e in edges]


def load_graph(path: PathLike) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
    """Load a ``{nodes, edges}`` editor graph."""
    return parse_graph(read_document(path))


def save_graph(
    nodes: list[WorkflowNode],
    edges: list[WorkflowEdge],
    path: PathLike,
    *,
    base: dict[str, Any] | None = None,
) -> None:
    """Write nodes and edges, keeping any other top-level keys from *base*."""
    data = dict(base or {})
    data["nodes"] = [n.to_dict() for n in nodes]
    data["edges"] = [e.to_dict() for e in edges]
    write_document(Path(path), data)
