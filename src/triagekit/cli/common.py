"""Helpers shared by CLI commands."""

from pathlib import Path

import click

from triagekit.analysis.ioc import IOCMatcher
from triagekit.analysis.pipeline import AnalysisPipeline, build_analyzers
from triagekit.core.config import TriageConfig, load_config
from triagekit.core.errors import IOCLoadError, TriageError, handle_error
from triagekit.core.logging import info, warning


def get_config(config_path: Path | None, ioc_file: Path | None) -> TriageConfig:
    """Load config, letting CLI flags override file values."""
    try:
        config = load_config(config_path)
    except TriageError as e:
        handle_error(e)
    if ioc_file is not None:
        config.ioc_file = ioc_file
    return config


def build_pipeline(config: TriageConfig) -> AnalysisPipeline:
    """Build the analyzer pipeline for a run.

    The IOC matcher runs last. If its list can't be loaded it is left
    out and the built-in analyzers still run.
    """
    pipeline = AnalysisPipeline(build_analyzers(config.analyzers))

    if config.ioc_file is not None:
        try:
            matcher = IOCMatcher.from_file(config.ioc_file)
        except IOCLoadError as e:
            warning(e.error.message, code=e.code)
        else:
            pipeline.append(matcher)
            info(f"Loaded {len(matcher)} indicators from {config.ioc_file}", **matcher.counts())

    return pipeline

