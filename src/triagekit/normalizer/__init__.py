"""Normalization layer for timeline reconstruction.

- Timeline: one resolved event time per artifact, chronologically sorted
- Summary: one-line human-readable message per artifact type
"""

from triagekit.normalizer.summary import summarize
from triagekit.normalizer.timeline import (
    Timeline,
    TimelineEntry,
    build_timeline,
    resolve_event_time,
    timestamp_desc,
)

__all__ = [
    "Timeline",
    "TimelineEntry",
    "build_timeline",
    "resolve_event_time",
    "timestamp_desc",
    "summarize",
]
