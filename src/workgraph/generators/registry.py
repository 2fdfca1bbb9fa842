"""Generator registry — get the right generator by name."""

from __future__ import annotations

from workgraph.generators.base import GeneratorBase
from workgraph.generators.command import CommandGenerator
from workgraph.generators.mock import MockGenerator


def get_generator(name: str, *, command: str = "") -> GeneratorBase:
    """Return a generator for *name*."""
    match name:
        case "mock":
            return MockGenerator()
        case "command":
            return CommandGenerator(command)
        case _:
            raise ValueError(f"Unknown generator: {name}")
