"""Triagekit: enrichment and timeline reconstruction for endpoint triage sweeps."""

__version__ = "0.1.0"
