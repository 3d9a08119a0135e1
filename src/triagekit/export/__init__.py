"""Result sinks: artifact writers and the timeline exporter."""

from triagekit.export.base import ArtifactWriter
from triagekit.export.csv_writer import CSVWriter
from triagekit.export.jsonl import JSONLWriter
from triagekit.export.multi import MultiWriter
from triagekit.export.timeline import (
    TimelineRecord,
    read_timeline_csv,
    write_timeline_csv,
)

__all__ = [
    "ArtifactWriter",
    "CSVWriter",
    "JSONLWriter",
    "MultiWriter",
    "TimelineRecord",
    "read_timeline_csv",
    "write_timeline_csv",
]
