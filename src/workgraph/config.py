"""Configuration defaults, env vars, and runtime options for workgraph."""

from __future__ import annotations

import os
from dataclasses import dataclass


VERSION = "1.0.0"

DEFAULT_GENERATOR = "mock"

GENERATOR_NAMES = ("mock", "command")


@dataclass
class Config:
    """Runtime configuration shared by the CLI subcommands."""

    # Workflow generation
    generator: str = ""
    generator_cmd: str = ""

    # Delegation
    force_reassign: bool = False

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.generator_cmd:
            self.generator_cmd = os.environ.get("WORKGRAPH_GENERATOR_CMD", "")
        if not self.generator:
            self.generator = (
                os.environ.get("WORKGRAPH_GENERATOR")
                or ("command" if self.generator_cmd else DEFAULT_GENERATOR)
            )
        self.generator = self.generator.strip().lower()
