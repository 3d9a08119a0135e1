"""Triagekit CLI entry point and global options."""

from typing import Literal

import click

from triagekit import __version__
from triagekit.cli.analyze import analyze
from triagekit.cli.ioc import ioc
from triagekit.cli.output import OutputFormat, OutputFormatter, set_output_format
from triagekit.cli.timeline import timeline
from triagekit.core.errors import handle_error
from triagekit.core.logging import configure_logging, set_verbose


@click.group()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "jsonl", "human"]),
    default="json",
    help="Output format (default: json)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging to stderr",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Only log warnings and errors",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Log format for stderr (default: text)",
)
@click.version_option(version=__version__, prog_name="triagekit")
@click.pass_context
def cli(
    ctx: click.Context,
    format: OutputFormat,
    verbose: bool,
    quiet: bool,
    log_format: Literal["text", "json"],
) -> None:
    """Triagekit: score, tag and timeline endpoint triage artifacts.

    Reads collector output, runs rule and IOC analyzers, classifies
    severity and rebuilds one chronological timeline.
    """
    ctx.ensure_object(dict)
    ctx.obj = {
        "format": format,
        "verbose": verbose,
        "quiet": quiet,
        "log_format": log_format,
        "formatter": OutputFormatter(format=format),
    }

    set_output_format(format)
    set_verbose(verbose)
    configure_logging(log_format=log_format, quiet=quiet)


cli.add_command(analyze)
cli.add_command(timeline)
cli.add_command(ioc)


# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INVALID_ARGS = 2


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        handle_error(e, EXIT_ERROR)


if __name__ == "__main__":
    main()
