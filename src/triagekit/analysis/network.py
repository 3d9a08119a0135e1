"""Network connection anomaly heuristics."""

from collections import Counter
from typing import ClassVar

from triagekit.analysis.base import Analyzer, apply_score, get_port, parse_int
from triagekit.models.artifact import Artifact

NETWORK_TYPES = frozenset({"network_connection", "open_network_file"})

C2_PORTS = frozenset({4444, 5555, 1337, 31337, 8443, 9999, 1234})
IRC_PORTS = frozenset({6667, 6668, 6669, 6697})
TOR_PORTS = frozenset({9050, 9150})

HIGH_CONN_THRESHOLD = 50

_LOCAL_PREFIXES = ("127.", "::1")
_WILDCARD_ADDRS = frozenset({"0.0.0.0", "*"})


def remote_port(artifact: Artifact) -> int:
    """Resolve the remote port.

    Uses ``remote_port`` when it holds a number, otherwise the
    trailing ``:port`` of ``remote_addr`` (lsof-style records).
    """
    port = get_port(artifact, "remote_port")
    if port:
        return port
    addr = artifact.get_string("remote_addr")
    if ":" in addr:
        return parse_int(addr.rsplit(":", 1)[1])
    return 0


def is_external(remote_addr: str) -> bool:
    """True when the remote address is set and not loopback/wildcard."""
    if not remote_addr:
        return False
    if remote_addr.startswith(_LOCAL_PREFIXES):
        return False
    return remote_addr not in _WILDCARD_ADDRS


class NetworkAnomalyAnalyzer(Analyzer):
    """Scores ``network_connection`` and ``open_network_file`` artifacts.

    Connection counts per pid are aggregated over the whole batch
    before any artifact is scored.
    """

    name: ClassVar[str] = "network_anomaly"

    def analyze(self, artifacts: list[Artifact]) -> list[Artifact]:
        conn_counts = self.count_connections(artifacts)
        for artifact in artifacts:
            if artifact.artifact_type not in NETWORK_TYPES:
                continue
            score, tags = self.score(artifact, conn_counts)
            apply_score(artifact, score, tags)
        return artifacts

    @staticmethod
    def count_connections(artifacts: list[Artifact]) -> Counter[str]:
        """Count network artifacts per pid (empty pids are ignored)."""
        counts: Counter[str] = Counter()
        for artifact in artifacts:
            if artifact.artifact_type not in NETWORK_TYPES:
                continue
            pid = artifact.get_string("pid")
            if pid:
                counts[pid] += 1
        return counts

    def score(
        self, artifact: Artifact, conn_counts: Counter[str]
    ) -> tuple[int, list[str]]:
        """Compute this analyzer's contribution without mutating."""
        score = 0
        tags: list[str] = []

        port = remote_port(artifact)
        external = is_external(artifact.get_string("remote_addr"))

        if port in C2_PORTS and external:
            score += 30
            tags.append(f"c2_port:{port}")

        if port in IRC_PORTS and external:
            score += 20
            tags.append("irc_connection")

        # Tor listens locally on its SOCKS port, so check both ends
        if port in TOR_PORTS or get_port(artifact, "local_port") in TOR_PORTS:
            score += 20
            tags.append("tor_connection")

        pid = artifact.get_string("pid")
        if pid and conn_counts.get(pid, 0) > HIGH_CONN_THRESHOLD:
            score += 10
            tags.append("high_conn_count")

        return score, tags
