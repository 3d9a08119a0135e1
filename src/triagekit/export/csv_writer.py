"""Flat CSV artifact sink."""

import csv
import json
from pathlib import Path

from triagekit.core.errors import ExportError
from triagekit.core.timestamps import format_millis
from triagekit.export.base import ArtifactWriter
from triagekit.models.artifact import Artifact

CSV_HEADER = [
    "timestamp",
    "collector_id",
    "artifact_type",
    "hostname",
    "risk_score",
    "event_time",
    "data_json",
]


class CSVWriter(ArtifactWriter):
    """Writes artifacts as CSV rows with the payload as JSON."""

    def __init__(self, output_path: str | Path) -> None:
        self.output_path = Path(output_path)
        try:
            self._file = open(self.output_path, "w", encoding="utf-8", newline="")
            self._writer = csv.writer(self._file)
            self._writer.writerow(CSV_HEADER)
        except OSError as e:
            raise ExportError(f"Cannot create {self.output_path}: {e}", str(self.output_path)) from e

    def write(self, artifact: Artifact) -> None:
        row = [
            format_millis(artifact.collected_at),
            artifact.collector_id,
            artifact.artifact_type,
            artifact.hostname,
            str(artifact.risk_score) if artifact.risk_score > 0 else "",
            format_millis(artifact.event_time) if artifact.event_time else "",
            json.dumps(artifact.data, separators=(",", ":"), ensure_ascii=False, default=str),
        ]
        try:
            self._writer.writerow(row)
        except OSError as e:
            raise ExportError(f"Write failed: {e}", str(self.output_path)) from e

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
