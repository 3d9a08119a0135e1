"""Observability metrics models for Triagekit."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class StepMetrics(BaseModel):
    """Metrics for a single pipeline step (one analyzer pass)."""

    run_id: UUID = Field(
        ...,
        description="Correlation ID for this run",
    )

    step_name: str = Field(
        ...,
        description="Step identifier (e.g., 'suspicious_process')",
    )

    duration_ms: int = Field(
        ...,
        ge=0,
        description="Execution time in milliseconds",
    )

    records_processed: int = Field(
        default=0,
        ge=0,
        description="Number of artifacts handed to the step",
    )

    records_output: int = Field(
        default=0,
        ge=0,
        description="Number of artifacts whose score or tags changed",
    )

    errors: int = Field(
        default=0,
        ge=0,
        description="Error count",
    )

    model_config = {"extra": "forbid"}


class RunMetadata(BaseModel):
    """Metadata for a CLI run."""

    run_id: UUID = Field(
        ...,
        description="Unique identifier for this run",
    )

    command: str = Field(
        ...,
        description="Command that was executed",
    )

    triagekit_version: str = Field(
        ...,
        description="Triagekit version",
    )

    started_at: datetime = Field(
        ...,
        description="ISO-8601 start timestamp",
    )

    completed_at: datetime | None = Field(
        default=None,
        description="ISO-8601 completion timestamp",
    )

    exit_code: int | None = Field(
        default=None,
        description="Process exit code",
    )

    metrics: list[StepMetrics] = Field(
        default_factory=list,
        description="Per-step metrics",
    )

    model_config = {"extra": "forbid"}
