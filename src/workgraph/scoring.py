"""Similarity scoring between candidate skillsets and task requirements."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from workgraph.skills import infer_required_skillset, infer_skillset_from_role, is_planning_work
from workgraph.tasks.model import Candidate, Task

# Roles that take precedence on planning/requirements work.
PLANNING_ROLE_PATTERN = re.compile(r"manager|product|pm|기획|planner|analyst|ba", re.IGNORECASE)


@dataclass
class ScoredCandidate:
    candidate: Candidate
    score: float
    skills: frozenset[str]


def similarity(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard index of two token sets.  Two empty sets score 0, not 1."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def phrase_similarity(a: str, b: str) -> float:
    """Word-overlap similarity between two short phrases."""
    return similarity(a.lower().split(), b.lower().split())


def _average_similarity(have: frozenset[str], need: frozenset[str]) -> float:
    if not have or not need:
        return 0.0
    total = sum(phrase_similarity(h, n) for h in have for n in need)
    return total / (len(have) * len(need))


def match_score(candidate: Candidate, task: Task) -> float:
    """Mean pairwise similarity of the candidate's and the task's skill tokens."""
    return _average_similarity(
        infer_skillset_from_role(candidate.role),
        infer_required_skillset(task),
    )


def is_planning_role(role: str | None) -> bool:
    return bool(PLANNING_ROLE_PATTERN.search(role or ""))


def rank_candidates(candidates: Sequence[Candidate], task: Task) -> list[ScoredCandidate]:
    """Best candidate first.

    Ordered by score (highest first), then name.  On planning work,
    planning roles go ahead of everyone else regardless of score.
    """
    required = infer_required_skillset(task)
    scored = []
    for c in candidates:
        skills = infer_skillset_from_role(c.role)
        scored.append(ScoredCandidate(c, _average_similarity(skills, required), skills))

    planning = is_planning_work(required)

    def sort_key(entry: ScoredCandidate) -> tuple[bool, float, str]:
        demoted = planning and not is_planning_role(entry.candidate.role)
        return (demoted, -entry.score, entry.candidate.name)

    return sorted(scored, key=sort_key)
