"""Artifact model shared by collectors, analyzers and the timeline."""

import json
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Severity(str, Enum):
    """Triage severity bucket derived from the risk score."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


def format_value(value: Any) -> str:
    """Render any payload value as text.

    Analyzers treat every field as text, so this never fails:
    None reads as empty, booleans as true/false, integral floats
    (as produced by JSON decoders) without a fractional part, and
    nested containers as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ArtifactMetadata(BaseModel):
    """Collection bookkeeping attached by the collector."""

    success: bool = Field(default=False, description="Collector step succeeded")
    error_message: str | None = Field(default=None, description="Collector error, if any")
    requires_root: bool = Field(default=False, description="Collector needed root")
    source_path: str | None = Field(default=None, description="File the artifact came from")
    file_hash: str | None = Field(default=None, description="Hash of the source file")
    collected_at: str | None = Field(default=None, description="Collector's own timestamp text")

    model_config = {"extra": "ignore"}


class Artifact(BaseModel):
    """One normalized record of evidence collected from the endpoint.

    Analyzers only read ``data``; they write ``risk_score``, ``tags``
    and, once, ``severity``.
    """

    collected_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        validation_alias=AliasChoices("collected_at", "timestamp"),
        description="When the collector produced the artifact",
    )

    collector_id: str = Field(
        default="",
        description="Origin collector",
    )

    artifact_type: str = Field(
        ...,
        description="Artifact type (running_process, network_connection, ...)",
    )

    hostname: str = Field(
        default="",
        description="Host the artifact was collected from",
    )

    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Collector payload (type-specific)",
    )

    metadata: ArtifactMetadata | None = Field(
        default=None,
        description="Collector bookkeeping (source path, file hash, ...)",
    )

    event_time: datetime | None = Field(
        default=None,
        description="Authoritative event timestamp resolved by the collector",
    )

    risk_score: int = Field(
        default=0,
        ge=0,
        description="Accumulated evidence score",
    )

    severity: Severity | None = Field(
        default=None,
        description="Severity bucket (None until classified)",
    )

    tags: list[str] = Field(
        default_factory=list,
        description="Evidence labels, first-seen order",
    )

    model_config = {"extra": "ignore"}

    @field_validator("collected_at", "event_time")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        """Store all instants as timezone-aware UTC."""
        if v is None:
            return None
        return _as_utc(v)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        """Drop repeated tags, keeping first occurrence."""
        return list(dict.fromkeys(v))

    def get_string(self, key: str) -> str:
        """Get a payload field as text ("" when missing)."""
        return format_value(self.data.get(key))

    def add_tags(self, *tags: str) -> None:
        """Append tags not already present, preserving order."""
        seen = set(self.tags)
        for tag in tags:
            if tag not in seen:
                self.tags.append(tag)
                seen.add(tag)

    def to_record(self) -> dict[str, Any]:
        """Convert to the JSON-ready dict written by artifact sinks."""
        record: dict[str, Any] = {
            "timestamp": self.collected_at.isoformat(),
            "collector_id": self.collector_id,
            "artifact_type": self.artifact_type,
            "hostname": self.hostname,
            "data": self.data,
        }
        if self.metadata is not None:
            record["metadata"] = self.metadata.model_dump(mode="json", exclude_none=True)
        if self.event_time is not None:
            record["event_time"] = self.event_time.isoformat()
        if self.risk_score:
            record["risk_score"] = self.risk_score
        if self.severity is not None:
            record["severity"] = self.severity.value
        if self.tags:
            record["tags"] = list(self.tags)
        return record
