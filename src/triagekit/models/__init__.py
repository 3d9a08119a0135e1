"""Pydantic models for Triagekit."""

from triagekit.models.artifact import Artifact, ArtifactMetadata, Severity, format_value
from triagekit.models.error import StructuredError
from triagekit.models.metrics import RunMetadata, StepMetrics

__all__ = [
    "Artifact",
    "ArtifactMetadata",
    "Severity",
    "format_value",
    "StructuredError",
    "StepMetrics",
    "RunMetadata",
]
