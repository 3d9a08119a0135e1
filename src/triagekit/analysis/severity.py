"""Risk score to severity classification."""

from triagekit.models.artifact import Artifact, Severity

# (minimum score, severity), highest first
SEVERITY_THRESHOLDS = (
    (80, Severity.CRITICAL),
    (60, Severity.HIGH),
    (40, Severity.MEDIUM),
    (20, Severity.LOW),
)


def severity_from_score(score: int) -> Severity:
    """Map a risk score to its severity bucket."""
    for minimum, severity in SEVERITY_THRESHOLDS:
        if score >= minimum:
            return severity
    return Severity.INFO


def classify_severity(artifacts: list[Artifact]) -> list[Artifact]:
    """Set severity on scored artifacts that don't have one yet."""
    for artifact in artifacts:
        if artifact.risk_score > 0 and artifact.severity is None:
            artifact.severity = severity_from_score(artifact.risk_score)
    return artifacts
