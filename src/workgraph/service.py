"""Request handling: create / modify via a generator, or auto-delegate locally."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from rich.markup import escape

from workgraph import log
from workgraph.delegation import auto_delegate
from workgraph.errors import GeneratorError
from workgraph.generators.base import GenerationRequest, GeneratorBase
from workgraph.generators.mock import MockGenerator
from workgraph.tasks.model import Candidate, Workflow
from workgraph.tasks.validate import compute_checks, validate_workflow

PromptAction = Literal["create", "modify", "auto_delegate"]

ACTIONS = ("create", "modify", "auto_delegate")


@dataclass
class PromptRequest:
    action: PromptAction
    user_input: str = ""
    workflow: Workflow | None = None
    candidates: list[Candidate] = field(default_factory=list)


@dataclass
class PromptResponse:
    success: bool
    workflow: Workflow | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.workflow is not None:
            out["workflow"] = self.workflow.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


def _finalize(workflow: Workflow) -> PromptResponse:
    """Re-validate and attach freshly computed checks."""
    validation = validate_workflow(workflow)
    workflow = replace(workflow, checks=compute_checks(workflow, validation.messages))
    return PromptResponse(
        success=validation.valid,
        workflow=workflow,
        error=None if validation.valid else "; ".join(validation.messages),
    )


def _delegate(request: PromptRequest) -> PromptResponse:
    if request.workflow is None:
        return PromptResponse(success=False, error="workflow is required for auto_delegate action")
    tasks = auto_delegate(request.workflow.tasks, request.candidates, force_reassign=True)
    return _finalize(replace(request.workflow, tasks=tasks))


def _generate(request: PromptRequest, generator: GeneratorBase) -> PromptResponse:
    if request.action == "modify" and request.workflow is None:
        return PromptResponse(success=False, error="workflow is required for modify action")

    gen_request = GenerationRequest(
        action=request.action,
        instruction=request.user_input,
        existing=request.workflow,
        candidates=list(request.candidates),
    )
    try:
        generated = generator.generate(gen_request)
    except GeneratorError as exc:
        if isinstance(generator, MockGenerator):
            raise
        log.warn(f"Generator '{generator.name}' failed, falling back to mock: {escape(str(exc))}")
        generated = MockGenerator().generate(gen_request)

    for note in generated.checks.messages:
        log.debug(f"generator: {escape(note)}")
    return _finalize(generated)


def process_request(request: PromptRequest, generator: GeneratorBase | None = None) -> PromptResponse:
    """Handle one request and return a validated response."""
    if request.action not in ACTIONS:
        return PromptResponse(success=False, error=f"Unknown action: {request.action}")
    if request.action == "auto_delegate":
        return _delegate(request)
    return _generate(request, generator or MockGenerator())
