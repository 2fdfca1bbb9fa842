"""Exceptions raised at the boundaries of the workflow core."""

from __future__ import annotations


class InvalidDocumentError(ValueError):
    """Raised when a workflow, graph or candidate document is malformed."""


class GeneratorError(RuntimeError):
    """Raised when an external workflow generator fails or returns garbage."""
