"""Deterministic keyword-driven generator used when no real generator is set up."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, replace
from datetime import date, timedelta

from workgraph import log
from workgraph.generators.base import GenerationRequest, GeneratorBase
from workgraph.tasks.model import (
    Assignee,
    Candidate,
    Flow,
    Task,
    TaskStatus,
    Workflow,
    WorkflowChecks,
)

MAX_NAME_LEN = 50

DESCRIPTION_SUFFIX = " (Enhanced with more details based on your request.)"
MODIFY_NOTE = "Mock workflow modification"


@dataclass(frozen=True)
class TaskPattern:
    keywords: tuple[str, ...]
    name: str
    description: str


TASK_PATTERNS: tuple[TaskPattern, ...] = (
    TaskPattern(
        ("design", "디자인"),
        "Design",
        "Create and refine the visual design from the requirements, following brand "
        "guidelines and user experience principles. Deliver the design files "
        "(Figma/PNG) and a design specification.",
    ),
    TaskPattern(
        ("develop", "code", "개발", "코드"),
        "Development",
        "Implement the feature to the specification with clean, maintainable code. "
        "Deliver the source code and implementation notes.",
    ),
    TaskPattern(
        ("review", "리뷰", "검토"),
        "Review",
        "Review the deliverables for quality, accuracy and completeness and give "
        "constructive feedback. Deliver review feedback and approval notes.",
    ),
    TaskPattern(
        ("test", "테스트"),
        "Testing",
        "Test thoroughly to find bugs and assure quality, documenting cases and "
        "results. Deliver test results and bug reports.",
    ),
    TaskPattern(
        ("approve", "승인"),
        "Approval",
        "Check every deliverable against the requirements and quality bar, then "
        "give final sign-off. Deliver the approval record.",
    ),
    TaskPattern(
        ("plan", "계획"),
        "Planning",
        "Define scope, goals and requirements, build a timeline and identify the "
        "resources needed. Deliver the project plan and requirements document.",
    ),
    TaskPattern(
        ("create", "make", "만들", "생성"),
        "Creation",
        "Produce the required deliverables to the specification with attention to "
        "quality and detail. Deliver the finished work and its documentation.",
    ),
    TaskPattern(
        ("research", "조사", "분석"),
        "Research",
        "Gather and analyze information from several sources and turn the findings "
        "into actionable insights. Deliver the findings and an analysis report.",
    ),
    TaskPattern(
        ("write", "작성"),
        "Writing",
        "Write clear, well-structured content with correct grammar and style. "
        "Deliver the written content and supporting documents.",
    ),
    TaskPattern(
        ("deploy", "배포"),
        "Deployment",
        "Release the application or feature to production, monitor the rollout and "
        "confirm it succeeded. Deliver deployment logs and release notes.",
    ),
)

POSTER_TASKS: tuple[TaskPattern, ...] = (
    TaskPattern(
        (),
        "Design Marketing Poster",
        "Design a marketing poster that carries the key message, uses the brand "
        "elements and appeals to the target audience. Deliver the poster design and assets.",
    ),
    TaskPattern(
        (),
        "Review Poster",
        "Assess the poster's effectiveness and brand alignment with detailed feedback "
        "on visuals and messaging. Deliver review feedback and revision notes.",
    ),
    TaskPattern(
        (),
        "Final Approval",
        "Do a final check of the revised poster, confirming all feedback is addressed. "
        "Deliver the approved poster and print-ready files.",
    ),
)

FEATURE_TASKS: tuple[TaskPattern, ...] = (
    TaskPattern(
        (),
        "Plan Feature",
        "Define the detailed specification of the new feature with requirements, user "
        "stories and acceptance criteria. Deliver the feature specification.",
    ),
    TaskPattern(
        (),
        "Implement Feature",
        "Develop the feature to the specification and write unit tests for it. "
        "Deliver the source code and unit tests.",
    ),
    TaskPattern(
        (),
        "Test Feature",
        "Test the implemented feature end to end, covering requirements and edge cases. "
        "Deliver test results and a QA report.",
    ),
)

GENERIC_TASKS: tuple[TaskPattern, ...] = (
    TaskPattern(
        (),
        "Plan & Prepare",
        "Analyze the requirements and draw up a plan, identifying goals, resources and "
        "risks. Deliver the plan and requirements document.",
    ),
    TaskPattern(
        (),
        "Execute Work",
        "Carry out the planned work along the roadmap while keeping quality high. "
        "Deliver the work results.",
    ),
    TaskPattern(
        (),
        "Review & Finalize",
        "Review all completed work against the original requirements and make final "
        "adjustments. Deliver the finished results.",
    ),
)

# Task-name fragment -> role fragments preferred for it.
ROLE_HINTS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("design",), ("design",)),
    (("develop", "code"), ("develop", "engineer")),
    (("test",), ("qa", "test")),
    (("approve", "review"), ("manager", "lead")),
)


def _contains_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(n in text for n in needles)


def _select_patterns(instruction: str) -> tuple[TaskPattern, ...]:
    found = tuple(p for p in TASK_PATTERNS if _contains_any(instruction, p.keywords))
    if found:
        return found
    if _contains_any(instruction, ("poster", "포스터", "marketing", "마케팅")):
        return POSTER_TASKS
    if _contains_any(instruction, ("feature", "기능")):
        return FEATURE_TASKS
    return GENERIC_TASKS


def _pick_candidate(task_name: str, index: int, candidates: list[Candidate]) -> Candidate | None:
    if not candidates:
        return None
    name = task_name.lower()
    for name_hints, role_hints in ROLE_HINTS:
        if _contains_any(name, name_hints):
            for c in candidates:
                if _contains_any(c.role.lower(), role_hints):
                    return c
            break
    return candidates[index % len(candidates)]


def _id_slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _workflow_name(instruction: str) -> str:
    name = instruction or "Generated Workflow"
    if len(name) > MAX_NAME_LEN:
        name = name[: MAX_NAME_LEN - 3] + "..."
    return name


class MockGenerator(GeneratorBase):
    """Builds sequential workflows from keywords found in the instruction."""

    name = "mock"

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def generate(self, request: GenerationRequest) -> Workflow:
        if request.action == "modify" and request.existing is not None:
            return self._modify(request)
        return self._create(request)

    def _create(self, request: GenerationRequest) -> Workflow:
        patterns = _select_patterns(request.instruction.lower())

        tasks: list[Task] = []
        for index, pattern in enumerate(patterns):
            chosen = _pick_candidate(pattern.name, index, request.candidates)
            tasks.append(Task(
                id=f"task-{index + 1}-{_id_slug(pattern.name)}",
                name=pattern.name,
                description=pattern.description,
                status=TaskStatus.IN_PROGRESS if index == 0 else TaskStatus.PENDING,
                assignee=Assignee.from_candidate(chosen) if chosen else Assignee.unassigned(),
                notes=f'Generated from: "{request.instruction}"',
            ))

        flows = [Flow(a.id, b.id) for a, b in zip(tasks, tasks[1:])]
        log.debug(f"Mock generator produced {len(tasks)} task(s)")
        return Workflow(
            workflow_name=_workflow_name(request.instruction),
            tasks=tasks,
            flows=flows,
            checks=WorkflowChecks(messages=["Mock workflow generated"]),
        )

    def _modify(self, request: GenerationRequest) -> Workflow:
        modified = copy.deepcopy(request.existing)
        instruction = request.instruction.lower()
        messages = list(modified.checks.messages)

        if _contains_any(instruction, ("deadline", "마감", "due")):
            today = self._today or date.today()
            modified.tasks = [
                replace(task, deadline=today + timedelta(days=7 + index * 2))
                for index, task in enumerate(modified.tasks)
            ]
            messages.append("Mock: Updated deadlines based on request")

        if _contains_any(instruction, ("description", "설명", "detail")):
            modified.tasks = [
                replace(task, description=task.description + DESCRIPTION_SUFFIX)
                for task in modified.tasks
            ]
            messages.append("Mock: Enhanced task descriptions")

        if MODIFY_NOTE not in messages:
            messages.append(MODIFY_NOTE)
        modified.checks = replace(modified.checks, messages=messages)
        return modified
