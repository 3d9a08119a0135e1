"""Load collector output into Artifact models.

Accepts JSONL (one artifact per line) or a JSON array.
"""

import json
from pathlib import Path
from typing import Any

import pydantic

from triagekit.core.errors import ParseError
from triagekit.models.artifact import Artifact


def _to_artifact(raw: Any, path: Path, line: int | None) -> Artifact:
    if not isinstance(raw, dict):
        raise ParseError("Artifact record must be a JSON object", path=str(path), line=line)
    try:
        return Artifact.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ParseError(
            f"Invalid artifact record: {e.errors()[0]['msg']}",
            path=str(path),
            line=line,
        ) from e


def load_artifacts(path: str | Path, hostname: str | None = None) -> list[Artifact]:
    """Read artifacts in file order.

    Args:
        path: JSONL or JSON file written by the collectors
        hostname: Fill-in for records with an empty hostname

    Returns:
        Artifacts in collection order

    Raises:
        ParseError: If the file is missing or holds malformed records
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {path}: {e}", path=str(path)) from e

    artifacts: list[Artifact] = []
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e}", path=str(path), line=e.lineno) from e
        artifacts = [_to_artifact(raw, path, None) for raw in records]
    else:
        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError as e:
                raise ParseError(f"Invalid JSON: {e}", path=str(path), line=line_number) from e
            artifacts.append(_to_artifact(raw, path, line_number))

    if hostname:
        for artifact in artifacts:
            if not artifact.hostname:
                artifact.hostname = hostname
    return artifacts
