"""workgraph CLI — validate, order, delegate and propagate workflow files.

Installed as ``workgraph`` console_script via pip.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.markup import escape

from workgraph import __version__
from workgraph import log as glog
from workgraph.config import GENERATOR_NAMES, Config
from workgraph.errors import GeneratorError, InvalidDocumentError
from workgraph.io_utils import read_document

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _fail(msg: str) -> None:
    glog.error(escape(msg))
    sys.exit(1)


def _resolve_output(source: Path, output: str, in_place: bool) -> Path | None:
    if output and in_place:
        raise click.UsageError("Use either --output or --in-place, not both.")
    if in_place:
        return source
    return Path(output) if output else None


def _load_workflow(path: Path):
    from workgraph.tasks.io import load_workflow

    try:
        return load_workflow(path)
    except InvalidDocumentError as exc:
        _fail(f"{path}: {exc}")


def _load_candidates(path: str):
    from workgraph.tasks.io import load_candidates

    if not path:
        return []
    try:
        return load_candidates(Path(path))
    except InvalidDocumentError as exc:
        _fail(f"{path}: {exc}")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="workgraph")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """workgraph — workflow graph engine.

    Validates task/flow workflows, orders them, propagates node statuses and
    auto-delegates tasks to team members.

    \b
    EXAMPLES:
      workgraph validate workflow.yaml
      workgraph order workflow.json
      workgraph delegate workflow.json --assignees team.yaml --force -i
      workgraph propagate graph.json --done design -i
      workgraph generate "Design and test a landing page" --assignees team.yaml
    """
    glog.set_verbose(verbose)
    ctx.obj = Config(verbose=verbose)


# ── validate / order ─────────────────────────────────────────────────


@main.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(workflow_file: Path) -> None:
    """Check task IDs, flow endpoints and cycles."""
    from workgraph.report import show_checks
    from workgraph.tasks.validate import compute_checks, validate_and_report

    workflow = _load_workflow(workflow_file)
    ok = validate_and_report(workflow)
    if glog.is_verbose():
        show_checks(compute_checks(workflow))
    if not ok:
        sys.exit(1)


@main.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def order(workflow_file: Path) -> None:
    """Print tasks in dependency order."""
    from workgraph.dag import find_cycles, topological_sort
    from workgraph.report import show_order

    workflow = _load_workflow(workflow_file)
    result = topological_sort(workflow.task_ids(), workflow.flows)
    if result is None:
        cycles = ", ".join(" → ".join(c) for c in find_cycles(workflow.flows))
        _fail(f"Workflow contains cycles: {cycles}")
    show_order(result)


# ── delegate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--assignees", "-a", "assignees_file", required=True,
              type=click.Path(exists=True, dir_okay=False), help="Assignee list (JSON/YAML)")
@click.option("--force", is_flag=True, help="Reassign tasks that already have an assignee")
@click.option("--output", "-o", default="", help="Write the delegated workflow here")
@click.option("--in-place", "-i", is_flag=True, help="Overwrite the input file")
@click.pass_obj
def delegate(
    cfg: Config,
    workflow_file: Path,
    assignees_file: str,
    force: bool,
    output: str,
    in_place: bool,
) -> None:
    """Assign tasks to the best-matching team members."""
    from workgraph.delegation import auto_delegate
    from workgraph.report import show_assignments, show_checks
    from workgraph.tasks.io import save_workflow
    from workgraph.tasks.validate import compute_checks, validate_workflow

    target = _resolve_output(workflow_file, output, in_place)
    cfg.force_reassign = force

    workflow = _load_workflow(workflow_file)
    candidates = _load_candidates(assignees_file)
    tasks = auto_delegate(workflow.tasks, candidates, force_reassign=cfg.force_reassign)
    updated = replace(workflow, tasks=tasks)
    validation = validate_workflow(updated)
    updated = replace(updated, checks=compute_checks(updated, validation.messages))

    show_assignments(workflow.tasks, updated.tasks)
    show_checks(updated.checks)

    if target:
        save_workflow(updated, target)
        glog.success(f"Saved {escape(str(target))}")
    if not validation.valid:
        sys.exit(1)


# ── propagate ────────────────────────────────────────────────────────


@main.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--done", "done_ids", multiple=True, help="Mark a node done before the pass (repeatable)")
@click.option("--output", "-o", default="", help="Write the updated document here")
@click.option("--in-place", "-i", is_flag=True, help="Overwrite the input file")
def propagate(graph_file: Path, done_ids: tuple[str, ...], output: str, in_place: bool) -> None:
    """Run one status propagation pass over a graph or workflow file."""
    from workgraph.report import show_status_changes
    from workgraph.tasks.io import is_graph_document

    target = _resolve_output(graph_file, output, in_place)
    try:
        data = read_document(graph_file)
        if is_graph_document(data):
            rows = _propagate_graph(data, done_ids, target)
        else:
            rows = _propagate_tasks(data, done_ids, target)
    except InvalidDocumentError as exc:
        _fail(f"{graph_file}: {exc}")
    except KeyError as exc:
        _fail(f"Unknown node id: {exc.args[0]}")

    show_status_changes(rows)
    if target:
        glog.success(f"Saved {escape(str(target))}")


def _propagate_graph(data: dict, done_ids: tuple[str, ...], target: Path | None) -> list[tuple[str, str, str]]:
    from workgraph.propagation import mark_done, update_node_statuses
    from workgraph.tasks.io import parse_graph, save_graph

    nodes, edges = parse_graph(data)
    before = {n.id: n.status for n in nodes}
    for node_id in done_ids:
        nodes = mark_done(nodes, node_id)
    nodes = update_node_statuses(nodes, edges)
    if target:
        save_graph(nodes, edges, target, base=data)
    return [
        (n.id, before[n.id].value if before[n.id] else "-", n.status.value if n.status else "-")
        for n in nodes
    ]


def _propagate_tasks(data: dict, done_ids: tuple[str, ...], target: Path | None) -> list[tuple[str, str, str]]:
    from workgraph.propagation import propagate_workflow
    from workgraph.tasks.io import save_workflow
    from workgraph.tasks.model import TaskStatus, Workflow

    workflow = Workflow.from_dict(data)
    before = {t.id: t.status for t in workflow.tasks}
    known = set(before)
    for task_id in done_ids:
        if task_id not in known:
            raise KeyError(task_id)
    tasks = [replace(t, status=TaskStatus.DONE) if t.id in done_ids else t for t in workflow.tasks]
    updated = propagate_workflow(replace(workflow, tasks=tasks))
    if target:
        save_workflow(updated, target)
    return [(t.id, before[t.id].value, t.status.value) for t in updated.tasks]


# ── generate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("instruction")
@click.option("--assignees", "-a", "assignees_file", default="",
              help="Assignee list (JSON/YAML)")
@click.option("--modify", "modify_file", default="", help="Existing workflow to modify")
@click.option("--generator", "generator_name", default=None,
              type=click.Choice(GENERATOR_NAMES, case_sensitive=False),
              help="Generator to use (default: $WORKGRAPH_GENERATOR or mock)")
@click.option("--output", "-o", default="", help="Write the generated workflow here")
@click.pass_obj
def generate(
    cfg: Config,
    instruction: str,
    assignees_file: str,
    modify_file: str,
    generator_name: str | None,
    output: str,
) -> None:
    """Create or modify a workflow from an instruction."""
    from workgraph.generators.registry import get_generator
    from workgraph.report import show_checks
    from workgraph.service import PromptRequest, process_request
    from workgraph.tasks.io import save_workflow

    if generator_name:
        cfg.generator = generator_name.lower()
    try:
        generator = get_generator(cfg.generator, command=cfg.generator_cmd)
    except ValueError as exc:
        _fail(str(exc))

    existing = _load_workflow(Path(modify_file)) if modify_file else None
    request = PromptRequest(
        action="modify" if existing else "create",
        user_input=instruction,
        workflow=existing,
        candidates=_load_candidates(assignees_file),
    )
    try:
        response = process_request(request, generator)
    except GeneratorError as exc:
        _fail(str(exc))

    workflow = response.workflow
    if workflow is None:
        _fail(response.error or "generation failed")

    glog.info(f"Workflow '{escape(workflow.workflow_name)}': {len(workflow.tasks)} task(s), {len(workflow.flows)} flow(s)")
    for task in workflow.tasks:
        who = task.assignee.name or "unassigned"
        glog.console.print(f"  - {escape(task.id)} [dim]({escape(who)})[/dim]")
    show_checks(workflow.checks)

    if output:
        save_workflow(workflow, Path(output))
        glog.success(f"Saved {escape(output)}")
    if not response.success:
        sys.exit(1)


# ── slug ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.option("--existing", multiple=True, help="IDs already in use (repeatable)")
def slug(name: str, existing: tuple[str, ...]) -> None:
    """Print a valid task ID derived from NAME."""
    from workgraph.dag import generate_task_id

    click.echo(generate_task_id(name, set(existing)))
