"""Suspicious running-process heuristics."""

from typing import ClassVar

from triagekit.analysis.base import TEMP_DIR_PREFIXES, Analyzer, apply_score
from triagekit.models.artifact import Artifact

# Network, scripting and anonymity tools
SUSPICIOUS_NAMES = frozenset({
    "nc",
    "ncat",
    "socat",
    "base64",
    "osascript",
    "nmap",
    "tcpdump",
    "python",
    "perl",
    "ruby",
    "tor",
    "obfs4proxy",
    "snowflake-client",
})

USER_HOME_PREFIXES = ("/Users/", "/home/")


class SuspiciousProcessAnalyzer(Analyzer):
    """Scores ``running_process`` artifacts.

    Rules are independent and additive:

    - exe under a world-writable temp dir: +30 ``exe_in_tmp``
    - base name is a known dual-use tool: +20 ``suspicious_name:<base>``
    - no exe path but a name: +15 ``no_exe_path``
    - root running from a user home: +25 ``root_in_user_dir``
    - dot-prefixed base name: +20 ``hidden_process``
    """

    name: ClassVar[str] = "suspicious_process"

    def analyze(self, artifacts: list[Artifact]) -> list[Artifact]:
        for artifact in artifacts:
            if artifact.artifact_type != "running_process":
                continue
            score, tags = self.score(artifact)
            apply_score(artifact, score, tags)
        return artifacts

    def score(self, artifact: Artifact) -> tuple[int, list[str]]:
        """Compute this analyzer's contribution without mutating."""
        score = 0
        tags: list[str] = []

        exe = artifact.get_string("exe")
        name = artifact.get_string("name")
        username = artifact.get_string("username")
        cwd = artifact.get_string("cwd")

        if exe.startswith(TEMP_DIR_PREFIXES):
            score += 30
            tags.append("exe_in_tmp")

        base_name = name.rsplit("/", 1)[-1]
        if base_name.lower() in SUSPICIOUS_NAMES:
            score += 20
            tags.append(f"suspicious_name:{base_name}")

        if not exe and name:
            score += 15
            tags.append("no_exe_path")

        if username == "root" and (
            cwd.startswith(USER_HOME_PREFIXES) or exe.startswith(USER_HOME_PREFIXES)
        ):
            score += 25
            tags.append("root_in_user_dir")

        if base_name.startswith("."):
            score += 20
            tags.append("hidden_process")

        return score, tags
