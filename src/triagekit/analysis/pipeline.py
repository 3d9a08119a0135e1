"""Analyzer pipeline: ordered enrichment passes then severity."""

from collections.abc import Iterable, Sequence
from uuid import UUID

from triagekit.analysis.base import Analyzer
from triagekit.analysis.network import NetworkAnomalyAnalyzer
from triagekit.analysis.persistence import PersistenceAnomalyAnalyzer
from triagekit.analysis.process import SuspiciousProcessAnalyzer
from triagekit.analysis.severity import classify_severity
from triagekit.core.errors import ValidationError
from triagekit.core.logging import debug, warning
from triagekit.core.metrics import MetricsCollector, generate_run_id
from triagekit.models.artifact import Artifact
from triagekit.models.metrics import StepMetrics

BUILTIN_ANALYZERS: dict[str, type[Analyzer]] = {
    SuspiciousProcessAnalyzer.name: SuspiciousProcessAnalyzer,
    NetworkAnomalyAnalyzer.name: NetworkAnomalyAnalyzer,
    PersistenceAnomalyAnalyzer.name: PersistenceAnomalyAnalyzer,
}

DEFAULT_ORDER = tuple(BUILTIN_ANALYZERS)


def default_analyzers() -> list[Analyzer]:
    """Fresh instances of the built-in analyzers in their fixed order."""
    return build_analyzers(DEFAULT_ORDER)


def build_analyzers(names: Iterable[str]) -> list[Analyzer]:
    """Instantiate built-in analyzers in the given order.

    Raises:
        ValidationError: If a name is not a built-in analyzer
    """
    analyzers: list[Analyzer] = []
    for name in names:
        analyzer_class = BUILTIN_ANALYZERS.get(name)
        if analyzer_class is None:
            raise ValidationError(
                f"Unknown analyzer '{name}' (available: {', '.join(BUILTIN_ANALYZERS)})",
                field="analyzers",
            )
        analyzers.append(analyzer_class())
    return analyzers


def _fingerprint(artifact: Artifact) -> tuple[int, int]:
    return artifact.risk_score, len(artifact.tags)


class AnalysisPipeline:
    """Runs analyzers over an artifact list, then classifies severity.

    The analyzer list is explicit and ordered; an IOC matcher is added
    with :meth:`append` once its indicator list has loaded. An analyzer
    that raises is logged and skipped, never aborting the run.
    """

    def __init__(self, analyzers: Sequence[Analyzer] | None = None) -> None:
        """Initialize the pipeline.

        Args:
            analyzers: Analyzers in execution order (defaults to the
                three built-ins)
        """
        self.analyzers: list[Analyzer] = (
            list(analyzers) if analyzers is not None else default_analyzers()
        )
        self.metrics: list[StepMetrics] = []

    def append(self, analyzer: Analyzer) -> None:
        """Register an analyzer to run after the current ones."""
        self.analyzers.append(analyzer)

    @property
    def names(self) -> list[str]:
        return [a.name for a in self.analyzers]

    def run(
        self, artifacts: list[Artifact], run_id: UUID | None = None
    ) -> list[Artifact]:
        """Enrich artifacts in place, preserving their order.

        Args:
            artifacts: Artifacts in collection order
            run_id: Correlation ID for step metrics

        Returns:
            The same list, with scores, tags and severities set
        """
        run_id = run_id or generate_run_id()
        self.metrics = []

        for analyzer in self.analyzers:
            collector = MetricsCollector(run_id=run_id, step_name=analyzer.name)
            collector.add_records_processed(len(artifacts))
            before = [_fingerprint(a) for a in artifacts]
            collector.start()
            try:
                result = analyzer.analyze(artifacts)
                if result is not None:
                    artifacts = result
            except Exception as e:
                collector.add_error()
                warning(
                    f"Analyzer {analyzer.name} failed, continuing",
                    analyzer=analyzer.name,
                    error=str(e),
                )
            collector.stop()

            changed = sum(
                1 for prev, a in zip(before, artifacts) if prev != _fingerprint(a)
            )
            collector.add_records_output(changed)
            step = collector.to_step_metrics()
            self.metrics.append(step)
            debug(
                f"Analyzer {analyzer.name} done",
                duration_ms=step.duration_ms,
                changed=changed,
            )

        return classify_severity(artifacts)
