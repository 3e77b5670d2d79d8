"""Command-line interface and high-level pipelines for the N-Queens tracer.

This module wires together configuration loading, single-board runs (count,
trace summary, paced playback) and the benchmark pipeline. It isolates I/O,
argument parsing and progress reporting from the search modules so that the
rest of the codebase remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import os
import tempfile
from pathlib import Path
from time import perf_counter
from typing import Iterable, Iterator, List, Optional, Tuple

from . import settings
from .experiments import (
    run_count_benchmark,
    run_count_benchmark_parallel,
    run_trace_survey,
)
from .plots import plot_benchmark, plot_cell_heatmap, plot_trace_composition
from .render import play_trace, render_solutions
from .reporting import (
    save_benchmark_to_csv,
    save_raw_runs_to_csv,
    save_trace_summary_to_csv,
)
from .stats import summarize_trace
from config_manager import ConfigManager
from nqtrace.search import (
    KNOWN_COUNTS,
    STRATEGIES,
    find_solutions,
    iter_search,
    normalize_strategy,
    search,
    timed_count,
)
from nqtrace.trace import TraceEvent, replay_boards
from nqtrace.utils import is_valid_solution, parse_size

DEFAULT_CONFIG = "config.json"


# ------------- Utils --------------------------------------------------------

def parse_strategy_filters(strategy_args: Optional[List[str]]) -> Optional[List[str]]:
    """Normalize strategy filter CLI inputs into a list of labels.

    Accepts repeated flags and comma-separated lists. Returns None when no
    filter is provided (meaning all configured strategies).
    """
    if not strategy_args:
        return None
    selected: List[str] = []
    for entry in strategy_args:
        for token in entry.split(","):
            token = token.strip()
            if token:
                selected.append(normalize_strategy(token))
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def parse_sizes(size_args: Optional[List[str]]) -> Optional[List[int]]:
    """Parse repeated or comma-separated board sizes into a sorted list."""
    if not size_args:
        return None
    sizes = set()
    for entry in size_args:
        for token in entry.split(","):
            token = token.strip()
            if token:
                sizes.add(parse_size(token))
    return sorted(sizes) or None


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and copy its values onto the ``settings`` module.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    (including the size and strategy errors) when a value is invalid.
    """
    config_mgr = ConfigManager(config_path)

    visualizer = config_mgr.get_visualizer_settings()
    if visualizer:
        settings.DEFAULT_N = parse_size(visualizer.get("default_n", settings.DEFAULT_N))
        settings.DEFAULT_STRATEGY = normalize_strategy(visualizer.get("strategy", settings.DEFAULT_STRATEGY))
        settings.MAX_TRACE_N = parse_size(visualizer.get("max_trace_n", settings.MAX_TRACE_N))
        settings.set_playback(
            delay=visualizer.get("playback_delay", settings.PLAYBACK_DELAY),
            emit_attempts=visualizer.get("emit_attempts", settings.EMIT_ATTEMPTS),
            solution_pause_factor=visualizer.get("solution_pause_factor", settings.SOLUTION_PAUSE_FACTOR),
        )

    benchmark = config_mgr.get_benchmark_settings()
    if benchmark:
        settings.N_VALUES = sorted({parse_size(n) for n in benchmark.get("N_values", settings.N_VALUES)})
        settings.STRATEGIES = [normalize_strategy(s) for s in config_mgr.get_strategies()]
        settings.RUNS_PER_SIZE = max(1, int(benchmark.get("runs_per_size", settings.RUNS_PER_SIZE)))
        settings.OUT_DIR = benchmark.get("output_dir", settings.OUT_DIR)
        settings.NUM_PROCESSES = max(1, int(benchmark.get("num_processes", settings.NUM_PROCESSES)))

    if not settings.N_VALUES:
        raise ValueError("No board sizes configured for the benchmark.")
    if not settings.STRATEGIES:
        raise ValueError("No strategies configured for the benchmark.")
    return config_mgr


# ------------- Single board -------------------------------------------------

def _tally_solutions(events: Iterable[TraceEvent], boards: List[Tuple[int, ...]]) -> Iterator[TraceEvent]:
    """Pass events through unchanged, recording solution boards as they go by."""
    for event in events:
        if event.is_solution:
            boards.append(event.board)
        yield event


def run_single(
    n: int,
    strategy: str,
    emit_attempts: bool,
    count_only: bool = False,
    play: bool = False,
    delay: Optional[float] = None,
    show_solutions: bool = False,
    validate: bool = False,
    limit: Optional[int] = None,
) -> int:
    """Count, trace or play back one board.

    Only count mode (or ``validate``) runs the count-only search; trace and
    playback take their totals from the events they consume, so playback of
    a large board starts at once. Returns the number of solutions counted,
    or seen during playback.
    """
    counted: Optional[int] = None
    if count_only or validate:
        counted, nodes, elapsed = timed_count(n, strategy)
        print(f"N={n}, strategy={strategy}: {counted} solution(s), {nodes} placements, {elapsed:.6f}s")
        if validate and n in KNOWN_COUNTS and counted != KNOWN_COUNTS[n]:
            raise AssertionError(f"Expected {KNOWN_COUNTS[n]} solutions for N={n}, counted {counted}")
        if count_only:
            return counted

    if n > settings.MAX_TRACE_N and not play:
        raise ValueError(f"Refusing to materialize a full trace for N={n} (limit {settings.MAX_TRACE_N}); use --count-only or --play.")

    if play:
        boards: List[Tuple[int, ...]] = []
        shown = play_trace(_tally_solutions(iter_search(n, strategy, emit_attempts), boards), delay=delay, limit=limit)
        print(f"Played {shown} step(s), {len(boards)} solution(s) shown.")
        return len(boards)

    events = search(n, strategy, emit_attempts)
    summary = summarize_trace(events, n, strategy, emit_attempts)
    print(
        f"Trace: {summary['events']} events "
        f"(attempt={summary['attempts']}, placed={summary['placements']}, "
        f"backtrack={summary['backtracks']}, solution={summary['solutions']})"
    )
    if validate:
        for _ in replay_boards(events, n):
            pass
        if summary["solutions"] != counted:
            raise AssertionError(f"Trace reports {summary['solutions']} solutions, count mode {counted}")
        for event in events:
            if event.is_solution and not is_valid_solution(event.board):
                raise AssertionError(f"Invalid solution in trace: {event.board}")
        print("Trace validated.")
    if show_solutions:
        render_solutions(event.board for event in events if event.is_solution)
    return summary["solutions"]


# ------------- Pipeline: benchmark ------------------------------------------

def main_benchmark(
    N_values: List[int],
    strategies: List[str],
    runs: int,
    out_dir: str,
    parallel: bool = False,
    plot: bool = False,
    validate: bool = False,
) -> None:
    """Benchmark count-only mode, survey traces, and write CSV/plots."""
    start_total = perf_counter()
    print("=" * 70)
    print("PHASE 1: COUNT BENCHMARK")
    print("=" * 70)
    if parallel:
        results = run_count_benchmark_parallel(
            N_values, strategies, runs, progress_label="Benchmark", validate=validate,
        )
    else:
        results = run_count_benchmark(
            N_values, strategies, runs, progress_label="Benchmark", validate=validate,
        )
    save_benchmark_to_csv(results, out_dir)
    save_raw_runs_to_csv(results, out_dir)

    print("\n" + "=" * 70)
    print("PHASE 2: TRACE SURVEY")
    print("=" * 70)
    summaries = run_trace_survey(N_values, strategies[0], settings.EMIT_ATTEMPTS)
    save_trace_summary_to_csv(summaries, out_dir)

    if plot:
        print("\n" + "=" * 70)
        print("PHASE 3: CHARTS")
        print("=" * 70)
        plot_benchmark(results, out_dir)
        plot_trace_composition(summaries, out_dir)
        heat_n = min(settings.DEFAULT_N, settings.MAX_TRACE_N)
        plot_cell_heatmap(iter_search(heat_n, strategies[0], True), heat_n, out_dir)

    total_time = perf_counter() - start_total
    print(f"\nBenchmark completed in {total_time:.1f}s")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test of both strategies.

    Verifies that:
    - Each strategy counts the known number of solutions for N=1..8.
    - Traces agree across strategies and contain exactly the counted
      solutions, each of them valid.
    - The benchmark pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests (N=1..8) across all strategies...")

    for label in STRATEGIES:
        for n in range(1, 9):
            solutions, nodes, elapsed = timed_count(n, label)
            if solutions != KNOWN_COUNTS[n]:
                raise AssertionError(f"{label} counted {solutions} solutions for N={n}, expected {KNOWN_COUNTS[n]}.")
        print(f"  [{label}] counts match for N=1..8")

    reference = search(6, "array")
    if search(6, "bitmask") != reference:
        raise AssertionError("Array and bitmask traces differ for N=6.")
    boards = [event.board for event in reference if event.is_solution]
    if len(boards) != KNOWN_COUNTS[6] or not all(is_valid_solution(b) for b in boards):
        raise AssertionError("Trace for N=6 does not contain the expected valid solutions.")
    if boards != find_solutions(6, "bitmask"):
        raise AssertionError("find_solutions disagrees with the trace for N=6.")
    print(f"  Traces agree for N=6 ({len(reference)} events)")

    results = run_count_benchmark([4, 5, 6], runs=2, validate=True)
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_benchmark_to_csv(results, tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Benchmark CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Trace, count and benchmark N-Queens backtracking search.")
    parser.add_argument("--n", "-n", help="Board size N (default from config, else 8).")
    parser.add_argument(
        "--strategy",
        "-s",
        action="append",
        help="Search encoding: array or bitmask (comma-separated or multiple flags for --benchmark).",
    )
    attempts = parser.add_mutually_exclusive_group()
    attempts.add_argument("--attempts", dest="emit_attempts", action="store_true", default=None, help="Include attempt events.")
    attempts.add_argument("--no-attempts", dest="emit_attempts", action="store_false", help="Omit attempt events.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--count-only", action="store_true", help="Only count solutions, skip the trace.")
    mode.add_argument("--trace", action="store_true", help="Build the full trace and print its summary (default mode).")
    mode.add_argument("--play", action="store_true", help="Play the trace back in the terminal.")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between playback frames.")
    parser.add_argument("--limit", type=int, default=None, help="Stop playback after this many steps.")
    parser.add_argument("--show-solutions", action="store_true", help="Print every solution board.")
    parser.add_argument("--benchmark", action="store_true", help="Benchmark strategies over the configured sizes.")
    parser.add_argument("--sizes", action="append", help="Board sizes for --benchmark (comma-separated or multiple flags).")
    parser.add_argument("--runs", type=int, default=None, help="Timed runs per (strategy, N) for --benchmark.")
    parser.add_argument("--parallel", action="store_true", help="Run the benchmark on a process pool.")
    parser.add_argument("--plot", action="store_true", help="Write charts with the benchmark.")
    parser.add_argument("--out-dir", default=None, help="Output directory for CSV and charts.")
    parser.add_argument("--config", default=None, help=f"Path to configuration file (default: {DEFAULT_CONFIG} when present).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Cross-check counts, traces and solutions (extra assertions).")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    config_path = args.config
    if config_path is None and os.path.exists(DEFAULT_CONFIG):
        config_path = DEFAULT_CONFIG
    try:
        if config_path is not None:
            apply_configuration(config_path)
        strategies = parse_strategy_filters(args.strategy)
        n = parse_size(args.n) if args.n is not None else settings.DEFAULT_N
        sizes = parse_sizes(args.sizes)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    emit_attempts = settings.EMIT_ATTEMPTS if args.emit_attempts is None else args.emit_attempts

    try:
        if args.benchmark:
            main_benchmark(
                sizes or settings.N_VALUES,
                strategies or settings.STRATEGIES,
                args.runs if args.runs is not None else settings.RUNS_PER_SIZE,
                args.out_dir or settings.OUT_DIR,
                parallel=args.parallel,
                plot=args.plot,
                validate=args.validate,
            )
        else:
            strategy = strategies[0] if strategies else settings.DEFAULT_STRATEGY
            run_single(
                n,
                strategy,
                emit_attempts,
                count_only=args.count_only,
                play=args.play,
                delay=args.delay,
                show_solutions=args.show_solutions,
                validate=args.validate,
                limit=args.limit,
            )
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
