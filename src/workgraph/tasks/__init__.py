"""Workflow task models, document I/O and validation."""
