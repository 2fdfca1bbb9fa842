"""UTF-8 file access and JSON/YAML documents for workflow, team and graph files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from workgraph.errors import InvalidDocumentError

PathLike = Path | str

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def read_text(path: PathLike) -> str:
    """Read a workflow, team or graph file as UTF-8; undecodable bytes raise."""
    return Path(path).read_text(encoding="utf-8")


def write_text(path: PathLike, text: str) -> None:
    Path(path).write_text(text, encoding="utf-8")


def read_document(path: PathLike) -> Any:
    """Parse a JSON or YAML file, chosen by suffix."""
    p = path if isinstance(path, Path) else Path(path)
    suffix = p.suffix.lower()
    try:
        text = read_text(p)
        if suffix in JSON_SUFFIXES:
            return json.loads(text)
        if suffix in YAML_SUFFIXES:
            return yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidDocumentError(f"{p}: {exc}") from exc
    raise InvalidDocumentError(f"{p}: unsupported file type {suffix or '(none)'!r}")


def write_document(path: PathLike, data: Any) -> None:
    """Serialize *data* as JSON or YAML, chosen by suffix."""
    p = path if isinstance(path, Path) else Path(path)
    suffix = p.suffix.lower()
    if suffix in JSON_SUFFIXES:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    elif suffix in YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        raise InvalidDocumentError(f"{p}: unsupported file type {suffix or '(none)'!r}")
    p.parent.mkdir(parents=True, exist_ok=True)
    write_text(p, text)
