"""Tests for workgraph.delegation — auto delegation and its notes."""

from __future__ import annotations

import copy

import pytest

from workgraph.delegation import (
    NO_ASSIGNEES_NOTE,
    NOTE_MARKER,
    auto_delegate,
    confidence_label,
    delegate_task,
    has_unassigned_tasks,
    strip_delegation_notes,
)
from workgraph.tasks.model import Task


def _by_id(tasks):
    return {t.id: t for t in tasks}


class TestAutoDelegate:
    def test_every_unassigned_task_gets_someone(self, sample_workflow, team):
        tasks = auto_delegate(sample_workflow.tasks, team)
        assert not has_unassigned_tasks(tasks)
        names = {c.name for c in team}
        for task in tasks:
            if task.id != "build-api":
                assert task.assignee.name in names

    def test_existing_assignment_kept(self, sample_workflow, team):
        tasks = _by_id(auto_delegate(sample_workflow.tasks, team))
        assert tasks["build-api"] is sample_workflow.tasks[1]
        assert tasks["build-api"].assignee.name == "Zed"

    def test_planning_task_goes_to_product_manager(self, sample_workflow, team):
        tasks = _by_id(auto_delegate(sample_workflow.tasks, team))
        plan = tasks["plan-launch"]
        assert plan.assignee.name == "Carol"
        assert plan.assignee.email == "carol@example.com"
        # "requirements" contains "ui", adding frontend/ui/design: 4 of 11 x 7 pairs match.
        assert plan.notes == f"{NOTE_MARKER} Assigned to Carol (5% confidence)"

    def test_force_reassigns_and_keeps_user_notes(self, sample_workflow, team):
        tasks = _by_id(auto_delegate(sample_workflow.tasks, team, force_reassign=True))
        build = tasks["build-api"]
        assert build.assignee.name == "Alice"
        assert build.notes == f"keep Zed on this\n{NOTE_MARKER} Assigned to Alice (7% confidence)"

    def test_forced_runs_leave_one_delegation_line(self, sample_workflow, team):
        once = auto_delegate(sample_workflow.tasks, team, force_reassign=True)
        twice = auto_delegate(once, team, force_reassign=True)
        for task in twice:
            lines = [line for line in task.notes.split("\n") if NOTE_MARKER in line]
            assert len(lines) == 1
        assert [t.notes for t in twice] == [t.notes for t in once]

    def test_inputs_not_mutated(self, sample_workflow, team):
        before = copy.deepcopy(sample_workflow.tasks)
        auto_delegate(sample_workflow.tasks, team, force_reassign=True)
        assert sample_workflow.tasks == before

    def test_no_candidates(self, sample_workflow):
        tasks = _by_id(auto_delegate(sample_workflow.tasks, []))
        assert tasks["plan-launch"].notes == NO_ASSIGNEES_NOTE
        assert not tasks["plan-launch"].assignee.is_assigned
        assert tasks["build-api"].notes == "keep Zed on this"
        assert has_unassigned_tasks(tasks.values())

    def test_no_candidates_appends_to_existing_notes(self):
        task = Task(id="t-1", name="Something", notes="call the vendor")
        (result,) = auto_delegate([task], [])
        assert result.notes == f"call the vendor\n{NO_ASSIGNEES_NOTE}"


class TestDelegateTask:
    def test_low_confidence_note(self, team):
        task = Task(id="gather", name="Gather pinecones near riverbank tonight please")
        result = delegate_task(task, team)
        assert result.assignee.name == "Alice"
        assert result.notes == f"{NOTE_MARKER} Assigned to Alice (low confidence - please review)"

    def test_returns_new_record(self, team):
        task = Task(id="build-api", name="Implement API")
        result = delegate_task(task, team)
        assert result is not task
        assert not task.assignee.is_assigned


class TestNotes:
    def test_strip_delegation_notes(self):
        notes = f"first\n{NOTE_MARKER} Assigned to A (5% confidence)\nsecond"
        assert strip_delegation_notes(notes) == "first\nsecond"

    def test_strip_empty(self):
        assert strip_delegation_notes(None) == ""
        assert strip_delegation_notes(f"{NOTE_MARKER} x") == ""

    @pytest.mark.parametrize(
        "score,label",
        [
            (0.0, "low confidence - please review"),
            (0.049, "low confidence - please review"),
            (0.05, "5% confidence"),
            (0.125, "13% confidence"),
            (1.0, "100% confidence"),
        ],
    )
    def test_confidence_label(self, score, label):
        assert confidence_label(score) == label
