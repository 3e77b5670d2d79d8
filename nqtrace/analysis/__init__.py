"""
Analysis and presentation package for the N-Queens tracer.

This package contains:
- settings: global knobs (defaults, playback pacing, benchmark sizes)
- stats: typed summaries and aggregation helpers
- experiments: count benchmarks (sequential and parallel) and trace surveys
- reporting: CSV exports
- plots: chart utilities
- render: terminal board drawing and paced playback
- cli: top-level pipeline entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    CountRecord,
    CountEntry,
    TraceSummary,
    BenchmarkResults,
    compute_detailed_statistics,
    summarize_trace,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "CountRecord",
    "CountEntry",
    "TraceSummary",
    "BenchmarkResults",
    # utils
    "compute_detailed_statistics",
    "summarize_trace",
    "ProgressPrinter",
    # settings module
    "settings",
]
