"""CSV export utilities for benchmark outputs and trace surveys.

These helpers materialize concise per-(strategy, N) summaries, full per-run
raw timings and trace composition tables for spreadsheet inspection.
Solutions themselves are never written out; only metrics are.
"""
from __future__ import annotations

import csv
import os
from typing import Iterable, List

import pandas as pd

from . import settings
from .experiments import benchmark_rows
from .stats import BenchmarkResults, TraceSummary
from nqtrace.trace import TraceEvent


def _build_suffix() -> str:
    """Return the ``_<RUN_ID>`` filename suffix when date stamping is enabled."""
    if getattr(settings, "DATE_IN_FILENAMES", False):
        return f"_{settings.RUN_ID}"
    return ""


def save_benchmark_to_csv(results: BenchmarkResults, out_dir: str) -> str:
    """Write one row of aggregate metrics per (strategy, N). Returns the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"benchmark_counts{_build_suffix()}.csv")
    rows = benchmark_rows(results)
    fieldnames = [
        "strategy",
        "n",
        "solutions",
        "expected",
        "matches_expected",
        "nodes",
        "runs",
        "time_mean",
        "time_median",
        "time_std",
        "time_min",
        "time_max",
    ]
    with open(filename, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    print(f"Benchmark summary saved: {filename}")
    return filename


def save_raw_runs_to_csv(results: BenchmarkResults, out_dir: str) -> str:
    """Write every individual timed run. Returns the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"benchmark_raw_runs{_build_suffix()}.csv")
    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["strategy", "n", "run", "solutions", "nodes", "time_seconds"])
        for label, entries in results.items():
            for N, entry in sorted(entries.items()):
                for index, run in enumerate(entry.get("raw_runs", []), start=1):
                    writer.writerow([label, N, index, run["solutions"], run["nodes"], f"{run['time']:.9f}"])
    print(f"Raw benchmark runs saved: {filename}")
    return filename


def trace_summary_frame(summaries: List[TraceSummary]) -> pd.DataFrame:
    """Tabulate trace surveys, adding the share of attempts that led to a placement."""
    frame = pd.DataFrame(summaries, columns=list(TraceSummary.__annotations__))
    attempts = frame["attempts"].where(frame["attempts"] > 0)
    frame["placement_ratio"] = (frame["placements"] / attempts).round(4)
    return frame


def save_trace_summary_to_csv(summaries: List[TraceSummary], out_dir: str) -> str:
    """Write the trace survey table. Returns the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"trace_composition{_build_suffix()}.csv")
    trace_summary_frame(summaries).to_csv(filename, index=False)
    print(f"Trace composition saved: {filename}")
    return filename


def trace_to_frame(events: Iterable[TraceEvent]) -> pd.DataFrame:
    """One row per event: step index, kind, coordinate and queens on the board."""
    records = [
        {
            "step": step,
            "kind": event.kind,
            "row": event.row,
            "col": event.col,
            "queens": event.queens,
        }
        for step, event in enumerate(events)
    ]
    frame = pd.DataFrame(records, columns=["step", "kind", "row", "col", "queens"])
    return frame.astype({"row": "Int64", "col": "Int64"})
