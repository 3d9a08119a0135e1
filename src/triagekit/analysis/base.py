"""Base analyzer interface and shared rule helpers."""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import ClassVar

from triagekit.models.artifact import Artifact

# World-writable temp directories (macOS resolves /tmp via /private)
TEMP_DIR_PREFIXES = ("/tmp/", "/var/tmp/", "/private/tmp/", "/private/var/tmp/")

_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")


class Analyzer(ABC):
    """Base class for enrichment analyzers.

    An analyzer receives the full artifact list, mutates the
    artifacts it cares about in place (score and tags only) and
    returns the same list. Field values that can't be read in the
    shape a rule needs make the rule not fire; analyzers never raise
    on malformed payloads.
    """

    name: ClassVar[str]

    @abstractmethod
    def analyze(self, artifacts: list[Artifact]) -> list[Artifact]:
        """Enrich artifacts in place.

        Args:
            artifacts: Full artifact list in collection order

        Returns:
            The same list
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def append_unique(existing: list[str], items: Iterable[str]) -> list[str]:
    """Append items not already present; first-seen order wins."""
    seen = set(existing)
    for item in items:
        if item not in seen:
            existing.append(item)
            seen.add(item)
    return existing


def apply_score(artifact: Artifact, score: int, tags: list[str]) -> bool:
    """Add a rule contribution to an artifact.

    Returns:
        True if the artifact was changed
    """
    if score <= 0:
        return False
    artifact.risk_score += score
    artifact.add_tags(*tags)
    return True


def parse_int(text: str) -> int:
    """Parse a decimal integer, returning 0 for anything else."""
    if not text or not _PORT_PATTERN.fullmatch(text):
        return 0
    return int(text)


def get_port(artifact: Artifact, key: str) -> int:
    """Read a port field, 0 when missing or non-numeric."""
    return parse_int(artifact.get_string(key))

