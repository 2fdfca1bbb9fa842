"""Shared fixtures for workgraph tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use workgraph.io_utils read_text/write_text for consistent UTF-8 I/O.
"""

from __future__ import annotations

import pytest

from workgraph import log
from workgraph.tasks.model import Assignee, Candidate, Flow, Task, Workflow


@pytest.fixture(autouse=True)
def _quiet_logs():
    """Reset the global verbose switch between tests."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)


@pytest.fixture
def team() -> list[Candidate]:
    return [
        Candidate(name="Alice", email="alice@example.com", role="Backend Engineer"),
        Candidate(name="Bob", email="bob@example.com", role="Marketing Lead"),
        Candidate(name="Carol", email="carol@example.com", role="Product Manager"),
        Candidate(name="Dan", email="dan@example.com", role="UI Designer"),
    ]


@pytest.fixture
def sample_workflow() -> Workflow:
    """Plan -> Build -> Test, with Build already assigned."""
    return Workflow(
        workflow_name="Launch",
        tasks=[
            Task(id="plan-launch", name="Plan launch", description="Define requirements and scope"),
            Task(
                id="build-api",
                name="Implement API",
                output=["source code"],
                assignee=Assignee.from_candidate(
                    Candidate(name="Zed", email="zed@example.com", role="Developer")
                ),
                notes="keep Zed on this",
            ),
            Task(id="test-api", name="Test API", description="Run the regression suite"),
        ],
        flows=[Flow("plan-launch", "build-api"), Flow("build-api", "test-api")],
    )
