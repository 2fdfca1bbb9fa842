"""Tests for workgraph.config — defaults and environment overrides."""

from __future__ import annotations

import pytest

from workgraph.config import DEFAULT_GENERATOR, Config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("WORKGRAPH_GENERATOR", raising=False)
    monkeypatch.delenv("WORKGRAPH_GENERATOR_CMD", raising=False)


def test_defaults():
    cfg = Config()
    assert cfg.generator == DEFAULT_GENERATOR
    assert cfg.generator_cmd == ""
    assert cfg.force_reassign is False


def test_command_env_selects_command(monkeypatch):
    monkeypatch.setenv("WORKGRAPH_GENERATOR_CMD", "my-gen --json")
    cfg = Config()
    assert cfg.generator == "command"
    assert cfg.generator_cmd == "my-gen --json"


def test_generator_env_wins(monkeypatch):
    monkeypatch.setenv("WORKGRAPH_GENERATOR_CMD", "my-gen")
    monkeypatch.setenv("WORKGRAPH_GENERATOR", " Mock ")
    assert Config().generator == "mock"


def test_explicit_values_win(monkeypatch):
    monkeypatch.setenv("WORKGRAPH_GENERATOR", "command")
    assert Config(generator="MOCK").generator == "mock"
