"""Generator adapter that delegates to an external command.

The command receives the request as JSON on stdin and must print a
workflow JSON document on stdout (optionally inside a fenced code block).
"""

from __future__ import annotations

import json
import shlex
import shutil
import subprocess
from dataclasses import replace

from rich.markup import escape

from workgraph import log
from workgraph.errors import GeneratorError, InvalidDocumentError
from workgraph.generators.base import GenerationRequest, GeneratorBase
from workgraph.tasks.model import Workflow

DEFAULT_TIMEOUT = 120


def extract_json_object(text: str) -> str:
    """Return the outermost ``{...}`` span of *text*."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return ""
    return text[start : end + 1]


class CommandGenerator(GeneratorBase):
    name = "command"

    def __init__(self, command: str, *, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.cmd = shlex.split(command) if command else []
        self.timeout = timeout

    def check_available(self) -> str | None:
        if not self.cmd:
            return "No generator command configured (set WORKGRAPH_GENERATOR_CMD)"
        if not shutil.which(self.cmd[0]):
            return f"{self.cmd[0]} not found in PATH"
        return None

    def generate(self, request: GenerationRequest) -> Workflow:
        err = self.check_available()
        if err:
            raise GeneratorError(err)

        payload = json.dumps(request.to_dict(), ensure_ascii=False)
        log.debug(escape(f"Running generator command: {' '.join(self.cmd)}"))
        try:
            proc = subprocess.run(
                self.cmd,
                input=payload,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise GeneratorError(f"{self.cmd[0]} not found") from None
        except subprocess.TimeoutExpired:
            raise GeneratorError(f"generator timed out after {self.timeout}s") from None

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            detail = stderr.splitlines()[0] if stderr else f"exit code {proc.returncode}"
            raise GeneratorError(f"generator failed: {detail}")

        workflow = self.parse_output(proc.stdout or "")
        return self._keep_user_outputs(workflow, request)

    @staticmethod
    def parse_output(raw: str) -> Workflow:
        """Parse a workflow document out of the command's stdout."""
        body = extract_json_object(raw)
        if not body:
            raise GeneratorError("generator returned no JSON object")
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            raise GeneratorError(f"generator returned invalid JSON: {exc}") from exc
        if isinstance(data, dict) and "workflow" in data and "tasks" not in data:
            data = data["workflow"]
        try:
            return Workflow.from_dict(data)
        except InvalidDocumentError as exc:
            raise GeneratorError(f"generator returned a malformed workflow: {exc}") from exc

    @staticmethod
    def _keep_user_outputs(workflow: Workflow, request: GenerationRequest) -> Workflow:
        # Outputs are written by people: carry over existing ones, blank the rest.
        existing = {t.id: t.output for t in request.existing.tasks} if request.existing else {}
        tasks = [replace(t, output=list(existing.get(t.id, []))) for t in workflow.tasks]
        return replace(workflow, tasks=tasks)
