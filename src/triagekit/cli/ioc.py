"""IOC list CLI commands."""

from pathlib import Path

import click

from triagekit.analysis.ioc import IOCMatcher
from triagekit.cli.output import OutputFormatter
from triagekit.core.errors import IOCLoadError, handle_error


@click.group()
def ioc() -> None:
    """Inspect indicator-of-compromise lists."""
    pass


@ioc.command("check")
@click.argument("ioc_file", type=click.Path(path_type=Path))
@click.pass_context
def check(ctx: click.Context, ioc_file: Path) -> None:
    """Load IOC_FILE and report how its lines were classified."""
    formatter: OutputFormatter = ctx.obj["formatter"]
    try:
        matcher = IOCMatcher.from_file(ioc_file)
    except IOCLoadError as e:
        handle_error(e)

    formatter.output(
        {
            "path": str(ioc_file),
            "total": len(matcher),
            "counts": matcher.counts(),
        },
        title="IOC list",
    )
