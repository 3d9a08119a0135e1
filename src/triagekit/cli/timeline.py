"""Timeline CLI command."""

from pathlib import Path

import click

from triagekit.cli.common import build_pipeline, get_config
from triagekit.cli.output import OutputFormatter
from triagekit.core.errors import TriageError, handle_error
from triagekit.core.loader import load_artifacts
from triagekit.normalizer import build_timeline, summarize


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
    help="Indicator list applied before ordering",
)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Show at most N entries",
)
@click.pass_context
def timeline(
    ctx: click.Context,
    input_path: Path,
    config_path: Path | None,
    ioc_file: Path | None,
    limit: int | None,
) -> None:
    """Print enriched artifacts in chronological order."""
    formatter: OutputFormatter = ctx.obj["formatter"]
    config = get_config(config_path, ioc_file)

    try:
        artifacts = load_artifacts(input_path, hostname=config.hostname)
    except TriageError as e:
        handle_error(e)

    build_pipeline(config).run(artifacts)
    entries = build_timeline(artifacts, summarize=summarize).entries

    limit = limit or config.timeline_limit
    if limit is not None:
        entries = entries[:limit]

    formatter.stream([entry.to_dict() for entry in entries], title="Timeline")
