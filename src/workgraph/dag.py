"""DAG utilities: cycle detection, topological ordering and task-ID helpers."""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Collection, Iterable, Sequence

from workgraph.tasks.model import Flow

TASK_ID_PATTERN = re.compile(r"[a-z0-9][a-z0-9-]{2,62}")

MAX_TASK_ID_LEN = 63
MIN_TASK_ID_LEN = 3


def _adjacency(flows: Iterable[Flow]) -> dict[str, list[str]]:
    """Map each node to its successors, in flow order.

    Every endpoint gets an entry, so iterating the keys visits all nodes
    in the order they first appear.
    """
    graph: dict[str, list[str]] = {}
    for flow in flows:
        graph.setdefault(flow.from_id, []).append(flow.to_id)
        graph.setdefault(flow.to_id, [])
    return graph


def predecessors(flows: Iterable[Flow]) -> dict[str, list[str]]:
    """Map each node that has incoming flows to its direct predecessors."""
    preds: dict[str, list[str]] = {}
    for flow in flows:
        preds.setdefault(flow.to_id, []).append(flow.from_id)
    return preds


def _walk(graph: dict[str, list[str]], on_back_edge) -> bool:
    """Depth-first search over every node of *graph* with an explicit stack.

    Calls ``on_back_edge(path, node)`` for each edge that re-enters a node
    still on the current path; stops early when the callback returns
    ``True``.  Returns ``True`` if it stopped early.
    """
    visited: set[str] = set()
    on_path: set[str] = set()

    for root in graph:
        if root in visited:
            continue
        path: list[str] = [root]
        stack = [iter(graph[root])]
        visited.add(root)
        on_path.add(root)

        while stack:
            neighbor = next(stack[-1], None)
            if neighbor is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            if neighbor not in visited:
                visited.add(neighbor)
                on_path.add(neighbor)
                path.append(neighbor)
                stack.append(iter(graph[neighbor]))
            elif neighbor in on_path:
                if on_back_edge(path, neighbor):
                    return True
    return False


def is_dag(flows: Iterable[Flow]) -> bool:
    """Return ``True`` if *flows* contain no directed cycle."""
    graph = _adjacency(flows)
    if not graph:
        return True
    return not _walk(graph, lambda _path, _node: True)


def find_cycles(flows: Iterable[Flow]) -> list[list[str]]:
    """Return every cycle met during the search, as ``[n, ..., n]`` sequences.

    Meant for error messages; overlapping cycles may all be reported.
    """
    cycles: list[list[str]] = []

    def record(path: list[str], node: str) -> bool:
        start = path.index(node)
        cycles.append(path[start:] + [node])
        return False

    _walk(_adjacency(flows), record)
    return cycles


def topological_sort(task_ids: Sequence[str], flows: Sequence[Flow]) -> list[str] | None:
    """Order *task_ids* so every flow points forward (Kahn's algorithm).

    Nodes without incoming flows are taken in *task_ids* order; the rest
    follow as their last predecessor is placed.  Flows touching unknown
    ids are ignored.  Returns ``None`` when the flows contain a cycle or
    *task_ids* repeats an id.
    """
    if not is_dag(flows):
        return None

    graph: dict[str, list[str]] = {tid: [] for tid in task_ids}
    in_degree: dict[str, int] = {tid: 0 for tid in task_ids}
    for flow in flows:
        if flow.from_id not in graph or flow.to_id not in graph:
            continue
        graph[flow.from_id].append(flow.to_id)
        in_degree[flow.to_id] += 1

    queue = deque(tid for tid, degree in in_degree.items() if degree == 0)
    result: list[str] = []
    while queue:
        node = queue.popleft()
        result.append(node)
        for neighbor in graph[node]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    # Duplicate ids can never all be placed.
    return result if len(result) == len(task_ids) else None


def is_valid_task_id(task_id: str) -> bool:
    """Lowercase alphanumerics and hyphens, 3-63 chars, alphanumeric first."""
    return bool(TASK_ID_PATTERN.fullmatch(task_id))


def generate_task_id(name: str, existing_ids: Collection[str]) -> str:
    """Derive a valid, unused task ID from a task name."""
    task_id = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")

    if not re.match(r"^[a-z0-9]", task_id):
        task_id = "task-" + task_id
    task_id = task_id[:MAX_TASK_ID_LEN]
    if len(task_id) < MIN_TASK_ID_LEN:
        task_id = task_id + "-task"

    candidate = task_id
    counter = 1
    while candidate in existing_ids:
        suffix = f"-{counter}"
        candidate = task_id[: MAX_TASK_ID_LEN - len(suffix)] + suffix
        counter += 1
    return candidate
