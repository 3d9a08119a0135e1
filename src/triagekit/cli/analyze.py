"""Analyze CLI command: enrich collector output and export results."""

from contextlib import ExitStack
from datetime import UTC, datetime
from pathlib import Path

import click

from triagekit import __version__
from triagekit.cli.common import build_pipeline, get_config
from triagekit.cli.output import OutputFormatter
from triagekit.core.errors import TriageError, handle_error
from triagekit.core.loader import load_artifacts
from triagekit.core.logging import debug, info
from triagekit.core.metrics import generate_run_id
from triagekit.export import CSVWriter, JSONLWriter, MultiWriter, write_timeline_csv
from triagekit.export.base import ArtifactWriter
from triagekit.models.artifact import Artifact, Severity
from triagekit.models.metrics import RunMetadata
from triagekit.normalizer import build_timeline, summarize

SEVERITY_ORDER = [s.value for s in Severity]


def _severity_rank(severity: Severity | None) -> int:
    if severity is None:
        return len(SEVERITY_ORDER)
    return SEVERITY_ORDER.index(severity.value)


def _finding(index: int, artifact: Artifact) -> dict:
    return {
        "index": index,
        "severity": artifact.severity.value if artifact.severity else None,
        "risk_score": artifact.risk_score,
        "artifact_type": artifact.artifact_type,
        "collector_id": artifact.collector_id,
        "summary": summarize(artifact),
        "tags": artifact.tags,
    }


def findings(artifacts: list[Artifact], min_severity: str = "info") -> list[dict]:
    """Scored artifacts at or above min_severity, highest score first.

    Ties keep collection order.
    """
    cutoff = SEVERITY_ORDER.index(min_severity)
    scored = [
        (i, a)
        for i, a in enumerate(artifacts)
        if a.risk_score > 0 and _severity_rank(a.severity) <= cutoff
    ]
    scored.sort(key=lambda pair: -pair[1].risk_score)
    return [_finding(i, a) for i, a in scored]


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file",
)
@click.option(
    "--ioc-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Indicator list (one IP, domain, hash or path per line)",
)
@click.option(
    "--output",
    "-o",
    "jsonl_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write enriched artifacts as JSONL",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write enriched artifacts as CSV",
)
@click.option(
    "--timeline",
    "timeline_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a Timesketch-compatible timeline CSV",
)
@click.option(
    "--min-severity",
    type=click.Choice(SEVERITY_ORDER),
    default="info",
    help="Lowest severity listed in findings (default: info)",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    input_path: Path,
    config_path: Path | None,
    ioc_file: Path | None,
    jsonl_path: Path | None,
    csv_path: Path | None,
    timeline_path: Path | None,
    min_severity: str,
) -> None:
    """Score, tag and classify collected artifacts.

    INPUT_PATH is collector output as JSONL or a JSON array.
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    config = get_config(config_path, ioc_file)
    run_id = generate_run_id()
    metadata = RunMetadata(
        run_id=run_id,
        command="analyze",
        triagekit_version=__version__,
        started_at=datetime.now(UTC),
    )

    try:
        artifacts = load_artifacts(input_path, hostname=config.hostname)
        info(f"Loaded {len(artifacts)} artifacts from {input_path}")

        pipeline = build_pipeline(config)
        artifacts = pipeline.run(artifacts, run_id=run_id)
        metadata.metrics = pipeline.metrics
        for step in pipeline.metrics:
            debug("step metrics", **step.model_dump(mode="json"))

        outputs: dict[str, str] = {}
        with ExitStack() as stack:
            writers: list[ArtifactWriter] = []
            if jsonl_path:
                writers.append(stack.enter_context(JSONLWriter(jsonl_path)))
                outputs["jsonl"] = str(jsonl_path)
            if csv_path:
                writers.append(stack.enter_context(CSVWriter(csv_path)))
                outputs["csv"] = str(csv_path)
            if writers:
                MultiWriter(*writers).write_many(artifacts)

        if timeline_path:
            timeline = build_timeline(artifacts, summarize=summarize)
            rows = write_timeline_csv(timeline, timeline_path)
            outputs["timeline"] = str(timeline_path)
            info(f"Wrote {rows} timeline rows to {timeline_path}")
    except TriageError as e:
        handle_error(e)

    metadata.completed_at = datetime.now(UTC)
    metadata.exit_code = 0

    severity_counts = {level: 0 for level in SEVERITY_ORDER}
    for artifact in artifacts:
        if artifact.severity is not None:
            severity_counts[artifact.severity.value] += 1

    formatter.output(
        {
            "run": metadata.model_dump(mode="json", exclude={"metrics"}),
            "analyzers": pipeline.names,
            "total_artifacts": len(artifacts),
            "scored_artifacts": sum(1 for a in artifacts if a.risk_score > 0),
            "severity_counts": severity_counts,
            "findings": findings(artifacts, min_severity),
            "outputs": outputs,
        },
        title="Triage analysis",
    )

