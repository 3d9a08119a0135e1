"""Run ID generation and per-step metrics collection."""

import time
from uuid import UUID, uuid4

from triagekit.models.metrics import StepMetrics


def generate_run_id() -> UUID:
    """Generate a unique run ID.

    Returns:
        UUID v4 for run correlation
    """
    return uuid4()


class MetricsCollector:
    """Collects metrics for one pipeline step."""

    def __init__(self, run_id: UUID | None = None, step_name: str = "unknown"):
        self.run_id = run_id or generate_run_id()
        self.step_name = step_name
        self.start_time: float | None = None
        self.end_time: float | None = None

        self.records_processed = 0
        self.records_output = 0
        self.errors = 0

    def start(self) -> None:
        """Mark the start of execution."""
        self.start_time = time.perf_counter()

    def stop(self) -> None:
        """Mark the end of execution."""
        self.end_time = time.perf_counter()

    @property
    def duration_ms(self) -> int:
        """Get execution duration in milliseconds."""
        if self.start_time is None:
            return 0
        end = self.end_time or time.perf_counter()
        return int((end - self.start_time) * 1000)

    def add_records_processed(self, count: int = 1) -> None:
        self.records_processed += count

    def add_records_output(self, count: int = 1) -> None:
        self.records_output += count

    def add_error(self) -> None:
        self.errors += 1

    def to_step_metrics(self) -> StepMetrics:
        """Convert to StepMetrics model."""
        return StepMetrics(
            run_id=self.run_id,
            step_name=self.step_name,
            duration_ms=self.duration_ms,
            records_processed=self.records_processed,
            records_output=self.records_output,
            errors=self.errors,
        )
