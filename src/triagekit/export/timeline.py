"""Timesketch-compatible timeline CSV export.

The four Timesketch mandatory columns come first: message, datetime,
timestamp (microseconds since epoch) and timestamp_desc.
"""

import csv
import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from triagekit.core.errors import ExportError, ParseError
from triagekit.normalizer.timeline import Timeline

TIMELINE_HEADER = [
    "message",
    "datetime",
    "timestamp",
    "timestamp_desc",
    "collector_id",
    "artifact_type",
    "hostname",
    "risk_score",
    "data",
]


class TimelineRecord(BaseModel):
    """One exported timeline row."""

    message: str = Field(default="", description="One-line summary")
    datetime: str = Field(..., description="UTC RFC3339 datetime")
    timestamp: int = Field(..., description="Microseconds since the Unix epoch")
    timestamp_desc: str = Field(..., description="Timestamp category")
    collector_id: str = Field(default="", description="Origin collector")
    artifact_type: str = Field(..., description="Artifact type")
    hostname: str = Field(default="", description="Source host")
    risk_score: int = Field(default=0, ge=0, description="Risk score")
    data: dict[str, Any] = Field(default_factory=dict, description="Artifact payload")

    model_config = {"extra": "forbid"}


def write_timeline_csv(timeline: Timeline, output_path: str | Path) -> int:
    """Write a timeline to CSV in timeline order.

    Returns:
        Number of rows written

    Raises:
        ExportError: If the file cannot be written
    """
    output_path = Path(output_path)
    count = 0
    try:
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(TIMELINE_HEADER)
            for entry in timeline:
                record = entry.to_dict()
                writer.writerow([
                    record["message"],
                    record["datetime"],
                    str(record["timestamp"]),
                    record["timestamp_desc"],
                    record["collector_id"],
                    record["artifact_type"],
                    record["hostname"],
                    str(record["risk_score"]),
                    json.dumps(
                        record["data"], separators=(",", ":"), ensure_ascii=False, default=str
                    ),
                ])
                count += 1
    except OSError as e:
        raise ExportError(f"Cannot write timeline {output_path}: {e}", str(output_path)) from e
    return count


def read_timeline_csv(input_path: str | Path) -> list[TimelineRecord]:
    """Read back an exported timeline.

    Raises:
        ParseError: If a row is malformed
    """
    input_path = Path(input_path)
    records: list[TimelineRecord] = []
    with open(input_path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for line_number, row in enumerate(reader, start=2):
            try:
                records.append(
                    TimelineRecord(
                        message=row["message"],
                        datetime=row["datetime"],
                        timestamp=int(row["timestamp"]),
                        timestamp_desc=row["timestamp_desc"],
                        collector_id=row["collector_id"],
                        artifact_type=row["artifact_type"],
                        hostname=row["hostname"],
                        risk_score=int(row["risk_score"] or 0),
                        data=json.loads(row["data"] or "{}"),
                    )
                )
            except (KeyError, ValueError, TypeError) as e:
                raise ParseError(
                    f"Malformed timeline row: {e}", path=str(input_path), line=line_number
                ) from e
    return records
