"""Timeline reconstruction across heterogeneous artifact types.

Each artifact gets one authoritative event time:

1. its explicit ``event_time``
2. the first candidate ``data`` field that parses under a known layout
3. its ``collected_at`` instant

Entries are then ordered with a stable sort, so artifacts resolving to
the same instant keep their collection order.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from triagekit.core.timestamps import (
    format_rfc3339,
    parse_timestamp,
    to_unix_micros,
)
from triagekit.models.artifact import Artifact

# Candidate payload fields, in priority order
TIME_FIELDS = (
    "visit_time",
    "last_visit_time",
    "mod_time",
    "timestamp",
    "event_time",
    "last_modified",
    "modified",
    "created",
)

# Exact artifact types -> timestamp description
TIMESTAMP_DESC_MAP = {
    "safari_history": "Browser Visit",
    "chrome_history": "Browser Visit",
    "running_process": "Process Running",
    "network_connection": "Network Connection",
    "open_network_file": "Network Connection",
    "recent_file": "File Accessed",
    "bash_history": "Command Executed",
    "zsh_history": "Command Executed",
    "quarantine_event": "File Downloaded",
    "user_crash_report": "Crash Report",
    "system_crash_report": "Crash Report",
    "install_log": "Software Installed",
}

DEFAULT_TIMESTAMP_DESC = "Event Logged"


def timestamp_desc(artifact_type: str) -> str:
    """Human-readable timestamp category for an artifact type."""
    at = artifact_type.lower()
    if at in TIMESTAMP_DESC_MAP:
        return TIMESTAMP_DESC_MAP[at]
    if at.endswith(("launch_agent", "launch_daemon")):
        return "Persistence Modified"
    if at.startswith("unified_log_"):
        return "Log Entry"
    if at.endswith("_status"):
        return "Security Status Collected"
    return DEFAULT_TIMESTAMP_DESC


def _field_time(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, str):
        return parse_timestamp(value)
    return None


def resolve_event_time(artifact: Artifact) -> datetime:
    """Best available event time for an artifact (always UTC-aware)."""
    if artifact.event_time is not None:
        return artifact.event_time

    for name in TIME_FIELDS:
        value = artifact.data.get(name)
        if not value:
            continue
        resolved = _field_time(value)
        if resolved is not None:
            return resolved

    return artifact.collected_at


@dataclass
class TimelineEntry:
    """An artifact placed on the timeline."""

    event_time: datetime
    timestamp_desc: str
    artifact: Artifact
    message: str = ""

    @property
    def timestamp(self) -> int:
        """Microseconds since the Unix epoch."""
        return to_unix_micros(self.event_time)

    @property
    def datetime_str(self) -> str:
        """UTC RFC3339 datetime string."""
        return format_rfc3339(self.event_time)

    def to_dict(self) -> dict[str, Any]:
        """Timesketch-style record for JSON output."""
        return {
            "message": self.message,
            "datetime": self.datetime_str,
            "timestamp": self.timestamp,
            "timestamp_desc": self.timestamp_desc,
            "collector_id": self.artifact.collector_id,
            "artifact_type": self.artifact.artifact_type,
            "hostname": self.artifact.hostname,
            "risk_score": self.artifact.risk_score,
            "data": self.artifact.data,
        }


@dataclass
class Timeline:
    """Chronologically ordered timeline entries."""

    entries: list[TimelineEntry] = field(default_factory=list)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def artifacts(self) -> list[Artifact]:
        """Artifacts in timeline order (for report rendering)."""
        return [entry.artifact for entry in self.entries]


def build_timeline(
    artifacts: list[Artifact],
    summarize: Callable[[Artifact], str] | None = None,
) -> Timeline:
    """Resolve event times and sort artifacts chronologically.

    Args:
        artifacts: Artifacts in collection order
        summarize: Optional one-line message builder per artifact

    Returns:
        Timeline sorted ascending by resolved time (stable on ties)
    """
    entries = [
        TimelineEntry(
            event_time=resolve_event_time(artifact),
            timestamp_desc=timestamp_desc(artifact.artifact_type),
            artifact=artifact,
            message=summarize(artifact) if summarize else "",
        )
        for artifact in artifacts
    ]
    entries.sort(key=lambda e: e.timestamp)
    return Timeline(entries=entries)
