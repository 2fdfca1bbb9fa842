"""CLI tests: every command runs and writes what it says it writes."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from workgraph import __version__
from workgraph.cli import main
from workgraph.io_utils import read_document, write_document
from workgraph.tasks.io import load_workflow, save_workflow


def _run_cli(args: list[str], timeout: int = 30) -> subprocess.CompletedProcess:
    """Run workgraph as a subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "workgraph"] + args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )


@pytest.fixture
def cli_runner():
    from click.testing import CliRunner
    return CliRunner()


@pytest.fixture
def workflow_file(tmp_path, sample_workflow) -> Path:
    path = tmp_path / "workflow.json"
    save_workflow(sample_workflow, path)
    return path


@pytest.fixture
def team_file(tmp_path, team) -> Path:
    path = tmp_path / "team.yaml"
    write_document(path, {"assignees": [c.to_dict() for c in team]})
    return path


@pytest.fixture
def cyclic_file(tmp_path) -> Path:
    path = tmp_path / "cyclic.yaml"
    write_document(path, {
        "workflow_name": "loop",
        "tasks": [{"id": "aaa", "name": "A"}, {"id": "bbb", "name": "B"}],
        "flows": [{"from": "aaa", "to": "bbb"}, {"from": "bbb", "to": "aaa"}],
    })
    return path


class TestCliHelpAndVersion:
    def test_help(self, cli_runner):
        r = cli_runner.invoke(main, ["-h"])
        assert r.exit_code == 0
        for command in ("validate", "order", "delegate", "propagate", "generate", "slug"):
            assert command in r.output

    def test_version(self, cli_runner):
        r = cli_runner.invoke(main, ["--version"])
        assert r.exit_code == 0
        assert __version__ in r.output

    def test_module_entry(self):
        r = _run_cli(["--version"])
        assert r.returncode == 0
        assert __version__ in r.stdout


class TestValidateAndOrder:
    def test_validate_ok(self, cli_runner, workflow_file):
        r = cli_runner.invoke(main, ["validate", str(workflow_file)])
        assert r.exit_code == 0, r.output
        assert "is valid" in r.output

    def test_validate_cycle(self, cli_runner, cyclic_file):
        r = cli_runner.invoke(main, ["validate", str(cyclic_file)])
        assert r.exit_code == 1

    def test_validate_malformed(self, cli_runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"tasks": "nope"}', encoding="utf-8")
        r = cli_runner.invoke(main, ["validate", str(bad)])
        assert r.exit_code == 1

    def test_validate_not_utf8(self, cli_runner, tmp_path):
        bad = tmp_path / "wf.json"
        bad.write_bytes(b"\xff\xfe{}")
        r = cli_runner.invoke(main, ["validate", str(bad)])
        assert r.exit_code == 1
        assert isinstance(r.exception, SystemExit)

    def test_delegate_assignees_not_utf8(self, cli_runner, workflow_file, tmp_path):
        team = tmp_path / "team.yaml"
        team.write_bytes(b"- name: \xff\n")
        r = cli_runner.invoke(main, ["delegate", str(workflow_file), "-a", str(team)])
        assert r.exit_code == 1
        assert isinstance(r.exception, SystemExit)

    def test_order(self, cli_runner, workflow_file):
        r = cli_runner.invoke(main, ["order", str(workflow_file)])
        assert r.exit_code == 0
        assert r.output.index("plan-launch") < r.output.index("build-api") < r.output.index("test-api")

    def test_order_cycle(self, cli_runner, cyclic_file):
        r = cli_runner.invoke(main, ["order", str(cyclic_file)])
        assert r.exit_code == 1


class TestDelegate:
    def test_writes_output(self, cli_runner, workflow_file, team_file, tmp_path):
        out = tmp_path / "out" / "delegated.yaml"
        r = cli_runner.invoke(main, ["delegate", str(workflow_file), "-a", str(team_file), "-o", str(out)])
        assert r.exit_code == 0, r.output
        wf = load_workflow(out)
        assert wf.get_task("plan-launch").assignee.name == "Carol"
        assert wf.get_task("build-api").assignee.name == "Zed"
        assert wf.checks.has_unassigned is False

    def test_force_in_place(self, cli_runner, workflow_file, team_file):
        r = cli_runner.invoke(main, ["delegate", str(workflow_file), "-a", str(team_file), "--force", "-i"])
        assert r.exit_code == 0, r.output
        assert load_workflow(workflow_file).get_task("build-api").assignee.name == "Alice"

    def test_output_and_in_place_conflict(self, cli_runner, workflow_file, team_file):
        r = cli_runner.invoke(main, ["delegate", str(workflow_file), "-a", str(team_file), "-i", "-o", "x.json"])
        assert r.exit_code == 2


class TestPropagate:
    def test_graph_document(self, cli_runner, tmp_path):
        graph = tmp_path / "graph.json"
        write_document(graph, {
            "nodes": [
                {"id": "a", "data": {"status": "completed", "output": "x"}},
                {"id": "b", "data": {"status": "pending"}},
            ],
            "edges": [{"source": "a", "target": "b"}],
        })
        r = cli_runner.invoke(main, ["propagate", str(graph), "--done", "a", "-i"])
        assert r.exit_code == 0, r.output
        nodes = read_document(graph)["nodes"]
        assert [n["data"]["status"] for n in nodes] == ["done", "progress"]

    def test_workflow_document(self, cli_runner, workflow_file, tmp_path):
        out = tmp_path / "next.json"
        r = cli_runner.invoke(main, ["propagate", str(workflow_file), "-o", str(out)])
        assert r.exit_code == 0, r.output
        statuses = [t.status.value for t in load_workflow(out).tasks]
        assert statuses == ["IN_PROGRESS", "PENDING", "PENDING"]

    def test_unknown_done_id(self, cli_runner, workflow_file):
        r = cli_runner.invoke(main, ["propagate", str(workflow_file), "--done", "nope"])
        assert r.exit_code == 1


class TestGenerate:
    def test_mock(self, cli_runner, team_file, tmp_path, monkeypatch):
        monkeypatch.delenv("WORKGRAPH_GENERATOR", raising=False)
        monkeypatch.delenv("WORKGRAPH_GENERATOR_CMD", raising=False)
        out = tmp_path / "gen.json"
        r = cli_runner.invoke(main, ["generate", "Design and test a page", "-a", str(team_file), "-o", str(out)])
        assert r.exit_code == 0, r.output
        assert load_workflow(out).task_ids() == ["task-1-design", "task-2-testing"]

    def test_modify(self, cli_runner, workflow_file, tmp_path):
        out = tmp_path / "mod.json"
        r = cli_runner.invoke(main, [
            "generate", "more detail please", "--modify", str(workflow_file),
            "--generator", "mock", "-o", str(out),
        ])
        assert r.exit_code == 0, r.output
        assert load_workflow(out).task_ids() == ["plan-launch", "build-api", "test-api"]

    def test_bad_generator_choice(self, cli_runner):
        r = cli_runner.invoke(main, ["generate", "x", "--generator", "gpt"])
        assert r.exit_code == 2


class TestSlug:
    def test_slug(self, cli_runner):
        r = cli_runner.invoke(main, ["slug", "Write the Docs!", "--existing", "write-the-docs"])
        assert r.exit_code == 0
        assert r.output.strip() == "write-the-docs-1"
