"""Base class for workflow generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal

from workgraph.tasks.model import Candidate, Workflow

GenerateAction = Literal["create", "modify"]


@dataclass
class GenerationRequest:
    """What a generator is asked to produce."""

    action: GenerateAction
    instruction: str = ""
    existing: Workflow | None = None
    candidates: list[Candidate] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "user_input": self.instruction,
            "inputed_workflow": self.existing.to_dict() if self.existing else None,
            "assignee_list": [c.to_dict() for c in self.candidates],
        }


class GeneratorBase(ABC):
    """Abstract generator.  Output is untrusted and re-validated by the caller."""

    name: str = "base"

    @abstractmethod
    def generate(self, request: GenerationRequest) -> Workflow:
        """Return a new workflow for *request*."""
        ...

    def check_available(self) -> str | None:
        """Return an error message if the generator cannot run, else None."""
        return None
