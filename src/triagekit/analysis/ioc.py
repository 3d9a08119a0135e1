"""Indicator-of-compromise matching against an analyst-supplied list.

The list is plain UTF-8 text, one indicator per line. Blank lines and
``#`` comments are skipped. Each line is classified, in order, as an
IP literal, a hex hash (32-128 chars), an absolute path, or a domain.
"""

import ipaddress
import re
from collections.abc import Iterable
from pathlib import Path
from typing import ClassVar, Literal

from triagekit.analysis.base import Analyzer, append_unique
from triagekit.core.errors import IOCLoadError
from triagekit.models.artifact import Artifact

IndicatorKind = Literal["ip", "domain", "hash", "path"]

IOC_SCORE = 90
IOC_TAG = "ioc_match"

HASH_PATTERN = re.compile(r"[0-9a-fA-F]{32,128}")


def _is_ip(value: str) -> bool:
    # Zone-scoped IPv6 (fe80::1%en0) is not a plain address literal
    if "%" in value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def classify_indicator(value: str) -> IndicatorKind:
    """Classify a single indicator line.

    Anything that is not an IP, hash or path is treated as a domain,
    dotted label or not.
    """
    if _is_ip(value):
        return "ip"
    if HASH_PATTERN.fullmatch(value):
        return "hash"
    if value.startswith("/"):
        return "path"
    return "domain"


class IOCMatcher(Analyzer):
    """Flags artifacts whose string fields contain a known indicator.

    IPs and paths match case-sensitively; domains and hashes are stored
    lower-cased and matched against the lower-cased field. A match sets
    the risk score to a fixed 90, replacing any accumulated score, and
    adds ``ioc_match`` plus one ``ioc_match:<kind>:<value>`` per match.
    """

    name: ClassVar[str] = "ioc_matcher"

    def __init__(self) -> None:
        # dicts keep file order so match tags are deterministic
        self.ips: dict[str, None] = {}
        self.domains: dict[str, None] = {}
        self.hashes: dict[str, None] = {}
        self.paths: dict[str, None] = {}

    @classmethod
    def from_file(cls, path: str | Path) -> "IOCMatcher":
        """Load indicators from a file.

        Raises:
            IOCLoadError: If the file cannot be opened or decoded
        """
        try:
            with open(path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise IOCLoadError(str(path), str(e)) from e
        return cls.from_lines(lines)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "IOCMatcher":
        """Build a matcher from indicator lines."""
        matcher = cls()
        for raw in lines:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            matcher.add(line)
        return matcher

    def add(self, indicator: str) -> IndicatorKind:
        """Classify and store one indicator."""
        kind = classify_indicator(indicator)
        if kind == "ip":
            self.ips[indicator] = None
        elif kind == "hash":
            self.hashes[indicator.lower()] = None
        elif kind == "path":
            self.paths[indicator] = None
        else:
            self.domains[indicator.lower()] = None
        return kind

    def counts(self) -> dict[str, int]:
        """Number of loaded indicators per kind."""
        return {
            "ip": len(self.ips),
            "domain": len(self.domains),
            "hash": len(self.hashes),
            "path": len(self.paths),
        }

    def __len__(self) -> int:
        return len(self.ips) + len(self.domains) + len(self.hashes) + len(self.paths)

    def match(self, artifact: Artifact) -> list[str]:
        """Return the distinct match tags for an artifact (no mutation)."""
        tags: list[str] = []
        for value in artifact.data.values():
            if not isinstance(value, str):
                continue
            lowered = value.lower()
            append_unique(tags, (f"ioc_match:ip:{ip}" for ip in self.ips if ip in value))
            append_unique(
                tags,
                (f"ioc_match:domain:{d}" for d in self.domains if d in lowered),
            )
            append_unique(
                tags,
                (f"ioc_match:hash:{h}" for h in self.hashes if h in lowered),
            )
            append_unique(
                tags,
                (f"ioc_match:path:{p}" for p in self.paths if p in value),
            )
        return tags

    def analyze(self, artifacts: list[Artifact]) -> list[Artifact]:
        for artifact in artifacts:
            tags = self.match(artifact)
            if not tags:
                continue
            # Overwrites any accumulated score, even a higher one
            artifact.risk_score = IOC_SCORE
            artifact.add_tags(IOC_TAG, *tags)
        return artifacts
