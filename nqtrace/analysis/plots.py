"""Visualization utilities for benchmark and trace outputs.

Overview
--------
Plotting helpers that write PNG charts from the structures produced by
``nqtrace.analysis.experiments``. Figures are rendered with the
non-interactive Agg backend so the helpers work on headless machines.

Chart map
---------
- 01_count_time_vs_N.png: mean count-only time per strategy (log scale).
- 02_nodes_vs_N.png: queens placed during the full search (log scale).
- 03_solutions_vs_N.png: solutions per N (bar), known counts overlaid.
- 04_trace_composition_vs_N.png: attempt/placed/backtrack/solution events per
  N (stacked bars, log scale).
- 05_cell_heatmap_N{N}.png: how often each cell was attempted and how often a
  queen was placed on it during one trace (seaborn heatmaps).

All functions return the list of files written.
"""
from __future__ import annotations

import os
from typing import Iterable, List, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402

from . import settings  # noqa: E402
from .stats import BenchmarkResults, TraceSummary  # noqa: E402
from nqtrace.search import KNOWN_COUNTS  # noqa: E402
from nqtrace.trace import ATTEMPT, PLACED, TraceEvent  # noqa: E402

MARKERS = {"array": "o", "bitmask": "s"}


def _suffix() -> str:
    return f"_{settings.RUN_ID}" if getattr(settings, "DATE_IN_FILENAMES", False) else ""


def _save(out_dir: str, name: str) -> str:
    fname = os.path.join(out_dir, f"{name}{_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved chart: {fname}")
    return fname


def plot_benchmark(results: BenchmarkResults, out_dir: str) -> List[str]:
    """Write the time, node and solution-count charts for a benchmark run."""
    os.makedirs(out_dir, exist_ok=True)
    written: List[str] = []

    plt.figure(figsize=(10, 6))
    for label, entries in results.items():
        N_values = sorted(entries)
        times = [max(entries[N]["time"].get("mean") or 0.0, 1e-7) for N in N_values]
        plt.semilogy(N_values, times, marker=MARKERS.get(label, "^"), linewidth=2, markersize=7, label=label)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Mean count time [s] (log scale)", fontsize=12)
    plt.title("Count-only Time vs Board Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    written.append(_save(out_dir, "01_count_time_vs_N"))

    plt.figure(figsize=(10, 6))
    for label, entries in results.items():
        N_values = sorted(entries)
        nodes = [max(entries[N]["nodes"], 1) for N in N_values]
        plt.semilogy(N_values, nodes, marker=MARKERS.get(label, "^"), linewidth=2, markersize=7, label=label)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Queens placed (log scale)", fontsize=12)
    plt.title("Search Tree Size vs Board Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    written.append(_save(out_dir, "02_nodes_vs_N"))

    first = next(iter(results.values()), {})
    N_values = sorted(first)
    if N_values:
        counts = np.array([first[N]["solutions"] for N in N_values])
        positions = np.arange(len(N_values))
        plt.figure(figsize=(10, 6))
        plt.bar(positions, counts, color="#1f77b4", alpha=0.8, label="counted")
        known = [(i, KNOWN_COUNTS[N]) for i, N in enumerate(N_values) if N in KNOWN_COUNTS]
        if known:
            xs, ys = zip(*known)
            plt.scatter(xs, ys, color="#d62728", marker="x", s=60, zorder=3, label="known")
        for x, y in zip(positions, counts):
            plt.annotate(str(int(y)), (x, y), textcoords="offset points", xytext=(0, 4), ha="center", fontsize=9)
        plt.xticks(positions, [str(N) for N in N_values])
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Solutions", fontsize=12)
        plt.title("Number of Solutions per Board Size", fontsize=14)
        plt.legend(fontsize=11)
        plt.grid(True, axis="y", alpha=0.5)
        written.append(_save(out_dir, "03_solutions_vs_N"))

    return written


def plot_trace_composition(summaries: List[TraceSummary], out_dir: str) -> List[str]:
    """Stacked bars of event kinds per N from a trace survey."""
    if not summaries:
        print("No trace summaries to plot")
        return []
    os.makedirs(out_dir, exist_ok=True)

    N_values = [s["n"] for s in summaries]
    positions = np.arange(len(N_values))
    layers = [
        ("attempts", "attempt", "#2ca02c"),
        ("placements", "placed", "#1f77b4"),
        ("backtracks", "backtrack", "#d62728"),
        ("solutions", "solution", "#ff7f0e"),
    ]

    plt.figure(figsize=(10, 6))
    bottom = np.zeros(len(N_values))
    for key, label, color in layers:
        values = np.array([s[key] for s in summaries], dtype=float)
        plt.bar(positions, values, bottom=bottom, color=color, alpha=0.85, label=label)
        bottom += values
    plt.yscale("log")
    plt.xticks(positions, [str(N) for N in N_values])
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Events (log scale)", fontsize=12)
    plt.title("Trace Composition vs Board Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, axis="y", alpha=0.5)
    return [_save(out_dir, "04_trace_composition_vs_N")]


def cell_frequencies(events: Iterable[TraceEvent], size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Count attempts and placements per board cell; arrays are indexed ``[row, col]``."""
    attempts = np.zeros((size, size), dtype=int)
    placements = np.zeros((size, size), dtype=int)
    for event in events:
        if event.kind == ATTEMPT:
            attempts[event.row, event.col] += 1
        elif event.kind == PLACED:
            placements[event.row, event.col] += 1
    return attempts, placements


def plot_cell_heatmap(events: Iterable[TraceEvent], size: int, out_dir: str) -> List[str]:
    """Side-by-side heatmaps of attempt and placement frequency for one trace."""
    os.makedirs(out_dir, exist_ok=True)
    attempts, placements = cell_frequencies(events, size)

    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    panels = [
        (axes[0], attempts, "Attempts per cell", "Greens"),
        (axes[1], placements, "Placements per cell", "Blues"),
    ]
    for ax, data, title, cmap in panels:
        sns.heatmap(data, ax=ax, cmap=cmap, annot=size <= 10, fmt="d", square=True, cbar=True)
        ax.set_title(title, fontsize=13)
        ax.set_xlabel("col")
        ax.set_ylabel("row")
    fig.suptitle(f"Search activity on a {size}x{size} board", fontsize=14)
    return [_save(out_dir, f"05_cell_heatmap_N{size}")]
