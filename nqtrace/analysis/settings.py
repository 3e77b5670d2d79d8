"""Global settings for the N-Queens trace tooling.

This module centralizes tunable constants used by the command line, the
playback renderer and the benchmark pipeline. Values can be overridden at
runtime via the configuration loader in
`nqtrace.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import List

# Board size used when none is given on the command line
DEFAULT_N: int = 8

# Search encoding used when none is given: 'array' | 'bitmask'
DEFAULT_STRATEGY: str = "array"

# Report every tested candidate as an 'attempt' event
EMIT_ATTEMPTS: bool = True

# Delay between playback frames in seconds, and the allowed range
PLAYBACK_DELAY: float = 0.5
MIN_PLAYBACK_DELAY: float = 0.0
MAX_PLAYBACK_DELAY: float = 2.0

# Extra hold after a solution frame, as a multiple of PLAYBACK_DELAY (added to
# the regular delay, so a solution frame stays up (1 + factor) * delay)
SOLUTION_PAUSE_FACTOR: float = 2.0

# Largest board for which full traces are materialized (playback, surveys)
MAX_TRACE_N: int = 12

# Board sizes to benchmark (in ascending order)
N_VALUES: List[int] = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]

# Strategies compared by the benchmark
STRATEGIES: List[str] = ["array", "bitmask"]

# Number of timed count runs per (strategy, N)
RUNS_PER_SIZE: int = 5

# Output directory for CSV and charts
OUT_DIR: str = "results_nqtrace"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")


def set_playback(
        delay: float = 0.5,
        emit_attempts: bool = True,
        solution_pause_factor: float = 2.0,
) -> None:
        """Configure playback pacing and trace verbosity.

        Parameters
        - delay: seconds between frames, clamped to
            ``[MIN_PLAYBACK_DELAY, MAX_PLAYBACK_DELAY]``.
        - emit_attempts: include 'attempt' events in traces.
        - solution_pause_factor: extra hold on solution frames, added to the
            regular delay and expressed as a multiple of ``delay``.

        Side effects
        - Updates module-level globals and prints a concise summary to stdout.
        """
        global PLAYBACK_DELAY, EMIT_ATTEMPTS, SOLUTION_PAUSE_FACTOR
        PLAYBACK_DELAY = min(MAX_PLAYBACK_DELAY, max(MIN_PLAYBACK_DELAY, float(delay)))
        EMIT_ATTEMPTS = bool(emit_attempts)
        SOLUTION_PAUSE_FACTOR = max(0.0, float(solution_pause_factor))

        print("Playback settings configured:")
        print(f"   - Delay: {PLAYBACK_DELAY:.2f}s")
        print(f"   - Attempts: {'shown' if EMIT_ATTEMPTS else 'hidden'}")
        print(f"   - Solution pause: +{SOLUTION_PAUSE_FACTOR:g}x delay")
