"""Benchmark and survey runners for both search strategies.

These routines execute repeatable batches of count-only runs for every
registered strategy across a set of board sizes, sequentially or on a
process pool, and survey the shape of full traces for small boards.

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally check that every strategy agrees with the known
solution counts.
"""
from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    BenchmarkResults,
    CountEntry,
    CountRecord,
    ProgressPrinter,
    TraceSummary,
    compute_detailed_statistics,
    summarize_trace,
)
from nqtrace.search import KNOWN_COUNTS, iter_search, normalize_strategy, timed_count


# Reusable workers -----------------------------------------------------------

def run_single_count(params: Tuple[str, int]) -> CountRecord:
    """Worker wrapper to invoke a single timed count (for parallel mapping)."""
    strategy, N = params
    solutions, nodes, elapsed = timed_count(N, strategy)
    return {"solutions": solutions, "nodes": nodes, "time": elapsed}


def _aggregate(N: int, runs: List[CountRecord], validate: bool, strategy: str) -> CountEntry:
    """Collapse repeated runs of one (strategy, N) pair into a single entry."""
    solution_counts = {run["solutions"] for run in runs}
    node_counts = {run["nodes"] for run in runs}
    if len(solution_counts) > 1 or len(node_counts) > 1:
        raise AssertionError(f"Non-deterministic count for {strategy} at N={N}: {sorted(solution_counts)}")

    expected = KNOWN_COUNTS.get(N)
    solutions = runs[0]["solutions"]
    matches = None if expected is None else solutions == expected
    if validate and matches is False:
        raise AssertionError(f"{strategy} counted {solutions} solutions for N={N}, expected {expected}")

    return {
        "solutions": solutions,
        "nodes": runs[0]["nodes"],
        "total_runs": len(runs),
        "expected": expected,
        "matches_expected": matches,
        "time": compute_detailed_statistics([run["time"] for run in runs]),
        "raw_runs": runs,
    }


def _check_agreement(results: BenchmarkResults, N_values: List[int]) -> None:
    """Raise if two strategies disagree on the solution or node count for some N."""
    for N in N_values:
        seen = {label: entries[N]["solutions"] for label, entries in results.items() if N in entries}
        if len(set(seen.values())) > 1:
            raise AssertionError(f"Strategies disagree for N={N}: {seen}")
        nodes = {label: entries[N]["nodes"] for label, entries in results.items() if N in entries}
        if len(set(nodes.values())) > 1:
            raise AssertionError(f"Strategies explored different trees for N={N}: {nodes}")


# Sequential runner ----------------------------------------------------------

def run_count_benchmark(
    N_values: List[int],
    strategies: Optional[List[str]] = None,
    runs: int = 1,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> BenchmarkResults:
    """Time the count-only mode of each strategy for every N.

    For each N in ``N_values`` and each strategy, ``runs`` independent timed
    counts are executed and aggregated. With ``validate`` the counts are
    checked against ``KNOWN_COUNTS`` and across strategies.
    """
    labels = [normalize_strategy(s) for s in (strategies or settings.STRATEGIES)]
    results: BenchmarkResults = {label: {} for label in labels}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        for label in labels:
            records = [run_single_count((label, N)) for _ in range(max(1, runs))]
            results[label][N] = _aggregate(N, records, validate, label)

    if validate:
        _check_agreement(results, N_values)
    return results


# Parallel runner ------------------------------------------------------------

def run_count_benchmark_parallel(
    N_values: List[int],
    strategies: Optional[List[str]] = None,
    runs: int = 1,
    progress_label: Optional[str] = None,
    validate: bool = False,
    num_processes: Optional[int] = None,
) -> BenchmarkResults:
    """Parallel version of ``run_count_benchmark`` using a process pool.

    Every (strategy, N, run) triple is an independent job. Wall-clock times
    are noisier than in the sequential runner because jobs share the CPU.
    """
    labels = [normalize_strategy(s) for s in (strategies or settings.STRATEGIES)]
    jobs = [(label, N) for N in N_values for label in labels for _ in range(max(1, runs))]
    workers = num_processes or settings.NUM_PROCESSES
    progress = ProgressPrinter(len(jobs), progress_label) if progress_label else None

    collected: Dict[Tuple[str, int], List[CountRecord]] = {}
    with ProcessPoolExecutor(max_workers=workers) as executor:
        for index, (job, record) in enumerate(zip(jobs, executor.map(run_single_count, jobs)), start=1):
            collected.setdefault(job, []).append(record)
            if progress:
                progress.update(index, f"{job[0]} N={job[1]}")

    results: BenchmarkResults = {label: {} for label in labels}
    for (label, N), records in collected.items():
        results[label][N] = _aggregate(N, records, validate, label)
    for label in labels:
        results[label] = dict(sorted(results[label].items()))

    if validate:
        _check_agreement(results, N_values)
    return results


# Trace surveys --------------------------------------------------------------

def run_trace_survey(
    N_values: List[int],
    strategy: str = "array",
    emit_attempts: bool = True,
    max_n: Optional[int] = None,
) -> List[TraceSummary]:
    """Summarize the full trace for each N up to ``max_n``.

    Traces are consumed lazily, so memory stays flat even for the largest
    sizes surveyed. Sizes above ``max_n`` (default ``settings.MAX_TRACE_N``)
    are skipped with a notice.
    """
    limit = settings.MAX_TRACE_N if max_n is None else max_n
    summaries: List[TraceSummary] = []
    for N in N_values:
        if N > limit:
            print(f"  Skipping trace survey for N={N} (limit {limit})")
            continue
        events = iter_search(N, strategy, emit_attempts)
        summaries.append(summarize_trace(events, N, normalize_strategy(strategy), emit_attempts))
    return summaries


def benchmark_rows(results: BenchmarkResults) -> List[Dict[str, Any]]:
    """Flatten benchmark results into one row per (strategy, N)."""
    rows: List[Dict[str, Any]] = []
    for label, entries in results.items():
        for N, entry in sorted(entries.items()):
            time_stats = entry.get("time", {})
            rows.append({
                "strategy": label,
                "n": N,
                "solutions": entry.get("solutions"),
                "expected": entry.get("expected"),
                "matches_expected": entry.get("matches_expected"),
                "nodes": entry.get("nodes"),
                "runs": entry.get("total_runs"),
                "time_mean": time_stats.get("mean"),
                "time_median": time_stats.get("median"),
                "time_std": time_stats.get("std"),
                "time_min": time_stats.get("min"),
                "time_max": time_stats.get("max"),
            })
    return rows
