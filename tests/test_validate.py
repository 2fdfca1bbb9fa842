"""Tests for workgraph.tasks.validate — structural workflow checks."""

from __future__ import annotations

from workgraph.tasks.model import Flow, Task, Workflow, WorkflowChecks
from workgraph.tasks.validate import compute_checks, validate_and_report, validate_workflow


def _workflow(ids, flows, name="wf"):
    return Workflow(
        workflow_name=name,
        tasks=[Task(id=i, name=i) for i in ids],
        flows=[Flow(a, b) for a, b in flows],
    )


class TestValidateWorkflow:
    def test_valid(self, sample_workflow):
        result = validate_workflow(sample_workflow)
        assert result.valid is True
        assert result.messages == []

    def test_missing_name(self):
        result = validate_workflow(_workflow(["aaa"], [], name="   "))
        assert result.messages == ["Workflow name is required"]

    def test_no_tasks(self):
        result = validate_workflow(_workflow([], []))
        assert result.messages == ["At least one task is required"]

    def test_invalid_id(self):
        result = validate_workflow(_workflow(["good-id", "Bad_ID"], []))
        assert result.messages == ["Task 2 has invalid ID format: Bad_ID"]

    def test_duplicate_id(self):
        result = validate_workflow(_workflow(["dup", "dup"], []))
        assert result.messages == ["Duplicate task ID: dup"]

    def test_unknown_flow_endpoint(self):
        result = validate_workflow(_workflow(["a1a", "b2b"], [("a1a", "b2b"), ("b2b", "ghost")]))
        assert result.messages == ["Flow 2 references non-existent task: ghost"]

    def test_cycle(self):
        result = validate_workflow(_workflow(["aaa", "bbb"], [("aaa", "bbb"), ("bbb", "aaa")]))
        assert result.valid is False
        assert result.messages == ["Workflow contains cycles: aaa → bbb → aaa"]

    def test_collects_everything(self):
        result = validate_workflow(
            _workflow(["a", "b"], [("a", "b"), ("b", "a"), ("a", "ghost")], name="")
        )
        assert not result.valid
        assert "Workflow name is required" in result.messages
        assert "Task 1 has invalid ID format: a" in result.messages
        assert "Flow 3 references non-existent task: ghost" in result.messages
        assert any(m.startswith("Workflow contains cycles:") for m in result.messages)


class TestComputeChecks:
    def test_fresh_checks(self, sample_workflow):
        stale = Workflow(
            workflow_name=sample_workflow.workflow_name,
            tasks=sample_workflow.tasks,
            flows=sample_workflow.flows,
            checks=WorkflowChecks(is_dag=False, has_unassigned=False, messages=["old"]),
        )
        checks = compute_checks(stale)
        assert checks == WorkflowChecks(is_dag=True, has_unassigned=True, messages=[])
        assert stale.checks.messages == ["old"]

    def test_cycle_reported(self):
        checks = compute_checks(_workflow(["aaa", "bbb"], [("aaa", "bbb"), ("bbb", "aaa")]), ["x"])
        assert checks.is_dag is False
        assert checks.messages == ["x"]


class TestValidateAndReport:
    def test_reports_result(self, sample_workflow):
        assert validate_and_report(sample_workflow) is True
        assert validate_and_report(_workflow([], [])) is False
