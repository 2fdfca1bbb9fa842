"""Task, Flow and Workflow data models used across loading, validation and delegation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from workgraph.errors import InvalidDocumentError


class TaskStatus(str, Enum):
    """Status of a task as exchanged with generators and persistence."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DONE = "DONE"

    def to_node(self) -> NodeStatus:
        return _TASK_TO_NODE[self]


class NodeStatus(str, Enum):
    """Status of a node in the editable workflow graph."""

    PENDING = "pending"
    PROGRESS = "progress"
    COMPLETED = "completed"
    DONE = "done"

    def to_task(self) -> TaskStatus:
        return _NODE_TO_TASK[self]


_TASK_TO_NODE = {
    TaskStatus.PENDING: NodeStatus.PENDING,
    TaskStatus.IN_PROGRESS: NodeStatus.PROGRESS,
    TaskStatus.COMPLETED: NodeStatus.COMPLETED,
    TaskStatus.DONE: NodeStatus.DONE,
}
_NODE_TO_TASK = {node: task for task, node in _TASK_TO_NODE.items()}


class AssigneeStatus(str, Enum):
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


FLOW_TYPES = ("depends_on",)


# ── boundary helpers ─────────────────────────────────────────────────


def _require_mapping(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise InvalidDocumentError(f"{what} must be an object, got {type(raw).__name__}")
    return raw


def _optional_str(raw: dict[str, Any], key: str) -> str | None:
    """Return a trimmed string, mapping ``None`` and blanks to ``None``."""
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidDocumentError(f"{key!r} must be a string or null")
    value = value.strip()
    return value or None


def _str(raw: dict[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidDocumentError(f"{key!r} must be a string")
    return value


def _parse_enum(enum_cls: type[Enum], value: Any, key: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidDocumentError(f"{key!r} must be one of {allowed}; got {value!r}") from None


def _parse_deadline(value: Any) -> date | None:
    if value is None or value == "":
        return None
    # PyYAML already turns unquoted ISO dates into date objects.
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDocumentError("'deadline' must be YYYY-MM-DD or null")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidDocumentError(f"'deadline' must be YYYY-MM-DD or null; got {value!r}") from None


def _parse_output(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise InvalidDocumentError("'output' must be a string or a list of strings")


def _optional_notes(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise InvalidDocumentError("'notes' must be a string or null")


# ── people ───────────────────────────────────────────────────────────


@dataclass
class Candidate:
    """A team member that tasks can be delegated to."""

    name: str
    email: str = ""
    role: str = ""

    @classmethod
    def from_dict(cls, raw: Any) -> Candidate:
        raw = _require_mapping(raw, "assignee candidate")
        name = _str(raw, "name").strip()
        if not name:
            raise InvalidDocumentError("assignee candidate is missing a name")
        return cls(name=name, email=_str(raw, "email"), role=_str(raw, "role"))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "email": self.email, "role": self.role}


@dataclass
class Assignee:
    """Who a task is assigned to.

    ``status`` is ``unassigned`` exactly when the identity fields are absent.
    """

    name: str | None = None
    email: str | None = None
    role: str | None = None
    status: AssigneeStatus = AssigneeStatus.UNASSIGNED

    def __post_init__(self) -> None:
        has_identity = any(v is not None for v in (self.name, self.email, self.role))
        if self.status == AssigneeStatus.UNASSIGNED and has_identity:
            raise ValueError("unassigned assignee must not carry name/email/role")
        if self.status == AssigneeStatus.ASSIGNED and self.name is None:
            raise ValueError("assigned assignee requires a name")

    @classmethod
    def unassigned(cls) -> Assignee:
        return cls()

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> Assignee:
        return cls(
            name=candidate.name,
            email=candidate.email,
            role=candidate.role,
            status=AssigneeStatus.ASSIGNED,
        )

    @property
    def is_assigned(self) -> bool:
        return self.status == AssigneeStatus.ASSIGNED

    @classmethod
    def from_dict(cls, raw: Any) -> Assignee:
        if raw is None:
            return cls.unassigned()
        raw = _require_mapping(raw, "assignee")
        status = _parse_enum(AssigneeStatus, raw.get("status", "unassigned"), "assignee.status")
        try:
            return cls(
                name=_optional_str(raw, "name"),
                email=_optional_str(raw, "email"),
                role=_optional_str(raw, "role"),
                status=status,
            )
        except ValueError as exc:
            raise InvalidDocumentError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "status": self.status.value,
        }


# ── tasks and flows ──────────────────────────────────────────────────


@dataclass
class Task:
    id: str
    name: str = ""
    description: str = ""
    output: list[str] = field(default_factory=list)
    deadline: date | None = None
    status: TaskStatus = TaskStatus.PENDING
    assignee: Assignee = field(default_factory=Assignee.unassigned)
    notes: str | None = None

    def text(self) -> str:
        """Name, description and outputs joined into one matching signal."""
        return f"{self.name} {self.description} {' '.join(self.output)}"

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        raw = _require_mapping(raw, "task")
        task_id = raw.get("id")
        if not isinstance(task_id, str):
            raise InvalidDocumentError("task is missing a string 'id'")
        return cls(
            id=task_id,
            name=_str(raw, "name"),
            description=_str(raw, "description"),
            output=_parse_output(raw.get("output")),
            deadline=_parse_deadline(raw.get("deadline")),
            status=_parse_enum(TaskStatus, raw.get("status", "PENDING"), "status"),
            assignee=Assignee.from_dict(raw.get("assignee")),
            notes=_optional_notes(raw.get("notes")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "output": list(self.output),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": self.status.value,
            "assignee": self.assignee.to_dict(),
            "notes": self.notes,
        }


@dataclass
class Flow:
    """``from_id`` must finish before ``to_id`` starts."""

    from_id: str
    to_id: str
    type: str = "depends_on"

    @classmethod
    def from_dict(cls, raw: Any) -> Flow:
        raw = _require_mapping(raw, "flow")
        src, dst = raw.get("from"), raw.get("to")
        if not isinstance(src, str) or not isinstance(dst, str):
            raise InvalidDocumentError("flow requires string 'from' and 'to'")
        flow_type = raw.get("type") or "depends_on"
        if flow_type not in FLOW_TYPES:
            raise InvalidDocumentError(f"unknown flow type: {flow_type!r}")
        return cls(from_id=src, to_id=dst, type=flow_type)

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "type": self.type}


@dataclass
class WorkflowChecks:
    is_dag: bool = True
    has_unassigned: bool = False
    messages: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> WorkflowChecks:
        if raw is None:
            return cls()
        raw = _require_mapping(raw, "checks")
        messages = raw.get("messages") or []
        return cls(
            is_dag=bool(raw.get("is_dag", True)),
            has_unassigned=bool(raw.get("has_unassigned", False)),
            messages=[str(m) for m in messages],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_dag": self.is_dag,
            "has_unassigned": self.has_unassigned,
            "messages": list(self.messages),
        }


@dataclass
class Workflow:
    workflow_name: str = ""
    tasks: list[Task] = field(default_factory=list)
    flows: list[Flow] = field(default_factory=list)
    checks: WorkflowChecks = field(default_factory=WorkflowChecks)

    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def get_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    @classmethod
    def from_dict(cls, raw: Any) -> Workflow:
        raw = _require_mapping(raw, "workflow")
        tasks = raw.get("tasks") or []
        flows = raw.get("flows") or []
        if not isinstance(tasks, list) or not isinstance(flows, list):
            raise InvalidDocumentError("'tasks' and 'flows' must be lists")
        return cls(
            workflow_name=_str(raw, "workflow_name"),
            tasks=[Task.from_dict(t) for t in tasks],
            flows=[Flow.from_dict(f) for f in flows],
            checks=WorkflowChecks.from_dict(raw.get("checks")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "workflow_name": self.workflow_name,
            "tasks": [t.to_dict() for t in self.tasks],
            "flows": [f.to_dict() for f in self.flows],
            "checks": self.checks.to_dict(),
        }


# ── editable graph view ──────────────────────────────────────────────


def _node_output(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    raise InvalidDocumentError("node.data.output must be a string")


def _node_status(value: Any) -> NodeStatus | None:
    if value is None:
        return None
    return _parse_enum(NodeStatus, value, "node.data.status")


@dataclass
class WorkflowNode:
    """A node of the editable graph: status and output live under ``data``.

    ``status`` is ``None`` for nodes without a ``data`` block or without a
    ``data.status``; those pass through status propagation untouched.
    ``raw`` keeps every other field so a load/save cycle does not drop
    editor state.
    """

    id: str
    status: NodeStatus | None = NodeStatus.PENDING
    output: str = ""
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> WorkflowNode:
        raw = _require_mapping(raw, "node")
        node_id = raw.get("id")
        if not isinstance(node_id, str):
            raise InvalidDocumentError("node is missing a string 'id'")
        data = raw.get("data")
        if data is None:
            return cls(id=node_id, status=None, raw=copy.deepcopy(raw))
        data = _require_mapping(data, "node.data")
        return cls(
            id=node_id,
            status=_node_status(data.get("status")),
            output=_node_output(data.get("output")),
            raw=copy.deepcopy(raw),
        )

    def to_dict(self) -> dict[str, Any]:
        out = copy.deepcopy(self.raw)
        out["id"] = self.id
        if self.status is not None:
            data = out.setdefault("data", {})
            data["status"] = self.status.value
            # Keep the stored shape (e.g. a list) unless the text changed.
            if _node_output(data.get("output")) != self.output:
                data["output"] = self.output
        return out


@dataclass
class WorkflowEdge:
    source: str
    target: str
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> WorkflowEdge:
        raw = _require_mapping(raw, "edge")
        src, dst = raw.get("source"), raw.get("target")
        if not isinstance(src, str) or not isinstance(dst, str):
            raise InvalidDocumentError("edge requires string 'source' and 'target'")
        return cls(source=src, target=dst, raw=copy.deepcopy(raw))

    def to_dict(self) -> dict[str, Any]:
        out = copy.deepcopy(self.raw)
        out["source"] = self.source
        out["target"] = self.target
        return out
