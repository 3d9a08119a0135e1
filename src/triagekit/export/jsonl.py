"""JSONL artifact sink."""

import json
from pathlib import Path

from triagekit.core.errors import ExportError
from triagekit.export.base import ArtifactWriter
from triagekit.models.artifact import Artifact


class JSONLWriter(ArtifactWriter):
    """Writes one enriched artifact per line."""

    def __init__(self, output_path: str | Path) -> None:
        self.output_path = Path(output_path)
        try:
            self._file = open(self.output_path, "w", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Cannot create {self.output_path}: {e}", str(self.output_path)) from e

    def write(self, artifact: Artifact) -> None:
        try:
            json.dump(artifact.to_record(), self._file, ensure_ascii=False, default=str)
            self._file.write("\n")
        except OSError as e:
            raise ExportError(f"Write failed: {e}", str(self.output_path)) from e

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
