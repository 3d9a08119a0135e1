"""Persistence mechanism anomaly heuristics."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import ClassVar

from triagekit.analysis.base import Analyzer, apply_score
from triagekit.core.timestamps import parse_rfc3339
from triagekit.models.artifact import Artifact

LAUNCH_AGENT_TYPES = frozenset({
    "user_launch_agent",
    "system_launch_agent",
    "system_launch_daemon",
})
SYSTEM_LAUNCH_TYPES = frozenset({"system_launch_agent", "system_launch_daemon"})
CRON_TYPES = frozenset({"user_crontab", "system_cron"})
LOGIN_ITEM_TYPES = frozenset({"login_item_btm", "login_item_backgrounditems"})
EXTENSION_TYPES = frozenset({"library_extension"})

VENDOR_PREFIX = "com.apple."
RECENT_WINDOW = timedelta(hours=24)

PLIST_TMP_MARKERS = ("/tmp/", "/var/tmp/", "/private/tmp/")
CRON_TMP_MARKERS = ("/tmp/", "/var/tmp/")
DOWNLOAD_TOOLS = ("curl", "wget")
SHELL_PIPES = ("| sh", "|sh", "| bash", "|bash")

ScoreResult = tuple[int, list[str]]


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


class PersistenceAnomalyAnalyzer(Analyzer):
    """Scores launch agents/daemons, cron entries, login items and extensions.

    Args:
        clock: Returns "now" for the recently-modified checks
            (defaults to the current UTC time, read once per run)
    """

    name: ClassVar[str] = "persistence_anomaly"

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def analyze(self, artifacts: list[Artifact]) -> list[Artifact]:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        for artifact in artifacts:
            score, tags = self.score(artifact, now)
            apply_score(artifact, score, tags)
        return artifacts

    def score(self, artifact: Artifact, now: datetime) -> ScoreResult:
        """Compute this analyzer's contribution without mutating."""
        artifact_type = artifact.artifact_type
        if artifact_type in LAUNCH_AGENT_TYPES:
            return self._analyze_launch_agent(artifact, now)
        if artifact_type in CRON_TYPES:
            return self._analyze_cron(artifact)
        if artifact_type in LOGIN_ITEM_TYPES:
            return self._analyze_login_item(artifact)
        if artifact_type in EXTENSION_TYPES:
            return self._analyze_extension(artifact, now)
        return 0, []

    @staticmethod
    def _recently_modified(artifact: Artifact, now: datetime) -> bool:
        mod_time = parse_rfc3339(artifact.get_string("mod_time"))
        if mod_time is None:
            return False
        return now - mod_time < RECENT_WINDOW

    def _analyze_launch_agent(self, artifact: Artifact, now: datetime) -> ScoreResult:
        score = 0
        tags: list[str] = []

        if self._recently_modified(artifact, now):
            score += 20
            tags.append("recently_modified")

        if _contains_any(artifact.get_string("path"), PLIST_TMP_MARKERS):
            score += 35
            tags.append("plist_in_tmp")

        if artifact.artifact_type in SYSTEM_LAUNCH_TYPES and not artifact.get_string(
            "name"
        ).startswith(VENDOR_PREFIX):
            score += 10
            tags.append("non_apple_system_plist")

        return score, tags

    def _analyze_cron(self, artifact: Artifact) -> ScoreResult:
        score = 0
        tags: list[str] = []

        entry = artifact.get_string("entry")
        entry_lower = entry.lower()
        if _contains_any(entry_lower, DOWNLOAD_TOOLS) and _contains_any(
            entry_lower, SHELL_PIPES
        ):
            score += 30
            tags.append("cron_curl_pipe_sh")

        if _contains_any(entry, CRON_TMP_MARKERS):
            score += 20
            tags.append("cron_tmp_path")

        return score, tags

    def _analyze_login_item(self, artifact: Artifact) -> ScoreResult:
        if "/tmp/" in artifact.get_string("path") or "/tmp/" in artifact.get_string(
            "content"
        ):
            return 25, ["login_item_tmp_path"]
        return 0, []

    def _analyze_extension(self, artifact: Artifact, now: datetime) -> ScoreResult:
        if self._recently_modified(artifact, now):
            return 15, ["recently_installed_extension"]
        return 0, []
