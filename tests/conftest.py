"""Shared fixtures for triagekit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from triagekit.models.artifact import Artifact

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """A fixed "current" instant for time-window rules."""
    return FIXED_NOW


@pytest.fixture
def make_artifact() -> Callable[..., Artifact]:
    """Return a factory building artifacts with sensible defaults."""

    def _make(artifact_type: str, data: dict[str, Any] | None = None, **kwargs: Any) -> Artifact:
        kwargs.setdefault("collected_at", FIXED_NOW)
        kwargs.setdefault("collector_id", "test_collector")
        kwargs.setdefault("hostname", "lab-host")
        return Artifact(artifact_type=artifact_type, data=data or {}, **kwargs)

    return _make
