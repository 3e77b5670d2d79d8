"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for benchmark outputs and trace summaries
and provides utilities to compute aggregate statistics over repeated runs.
"""
from __future__ import annotations

import statistics
from typing import Dict, Iterable, List, Optional, TypedDict

from nqtrace.trace import ATTEMPT, BACKTRACK, PLACED, SOLUTION, TraceEvent


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class CountRecord(TypedDict):
    solutions: int
    nodes: int
    time: float


class CountEntry(TypedDict, total=False):
    solutions: int
    nodes: int
    total_runs: int
    expected: Optional[int]
    matches_expected: Optional[bool]
    time: StatsSummary
    raw_runs: List[CountRecord]


class TraceSummary(TypedDict):
    n: int
    strategy: str
    emit_attempts: bool
    events: int
    attempts: int
    placements: int
    backtracks: int
    solutions: int
    max_depth: int


# strategy label -> N -> aggregated entry
BenchmarkResults = Dict[str, Dict[int, CountEntry]]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps expected. Values <= 0 are coerced to 1.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float]) -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Returns count, mean, median, population std, min, max, 25th and 75th
    percentiles and range. On empty input every numeric field is ``None`` and
    ``count`` is 0, which keeps CSV columns aligned.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)
    min_val = sorted_vals[0]
    max_val = sorted_vals[-1]

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0.0,
        "min": min_val,
        "max": max_val,
        "q25": sorted_vals[n // 4] if n >= 4 else min_val,
        "q75": sorted_vals[3 * n // 4] if n >= 4 else max_val,
        "range": max_val - min_val,
    }


def summarize_trace(events: Iterable[TraceEvent], n: int, strategy: str, emit_attempts: bool) -> TraceSummary:
    """Fold a trace into per-kind counters in a single pass.

    ``max_depth`` is the largest number of queens seen on any snapshot, so
    it equals ``n`` exactly when the trace contains a solution.
    """
    counts = {ATTEMPT: 0, PLACED: 0, BACKTRACK: 0, SOLUTION: 0}
    total = 0
    max_depth = 0
    for event in events:
        total += 1
        counts[event.kind] += 1
        if event.kind == PLACED:
            max_depth = max(max_depth, event.row + 1)
    return {
        "n": n,
        "strategy": strategy,
        "emit_attempts": emit_attempts,
        "events": total,
        "attempts": counts[ATTEMPT],
        "placements": counts[PLACED],
        "backtracks": counts[BACKTRACK],
        "solutions": counts[SOLUTION],
        "max_depth": max_depth,
    }
