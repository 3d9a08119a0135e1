"""Enrichment analyzers: rule heuristics, IOC matching, severity."""

from triagekit.analysis.base import Analyzer
from triagekit.analysis.ioc import IOCMatcher
from triagekit.analysis.network import NetworkAnomalyAnalyzer
from triagekit.analysis.persistence import PersistenceAnomalyAnalyzer
from triagekit.analysis.pipeline import (
    AnalysisPipeline,
    build_analyzers,
    default_analyzers,
)
from triagekit.analysis.process import SuspiciousProcessAnalyzer
from triagekit.analysis.severity import classify_severity, severity_from_score

__all__ = [
    "Analyzer",
    "AnalysisPipeline",
    "IOCMatcher",
    "NetworkAnomalyAnalyzer",
    "PersistenceAnomalyAnalyzer",
    "SuspiciousProcessAnalyzer",
    "build_analyzers",
    "classify_severity",
    "default_analyzers",
    "severity_from_score",
]
