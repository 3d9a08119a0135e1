"""Triagekit CLI layer."""

__all__ = ["cli"]


def cli() -> None:
    """Lazy import and run the CLI."""
    from triagekit.cli.main import main as _main

    _main()
