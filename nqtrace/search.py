"""Public entry points: trace search and solution counting.

Both strategies are registered in ``STRATEGIES`` under a short label:

- ``"array"``: column-array encoding with the scan-form validity test
  (``nqtrace.backtracking``);
- ``"bitmask"``: three-mask encoding with O(1) validity and lowest-set-bit
  candidate extraction (``nqtrace.bitmask``).

Every entry point validates its arguments before any board is allocated:
``InvalidSizeError`` for a size that is not a positive integer and
``UnsupportedStrategyError`` for an unknown label. ``iter_search`` performs
the checks at call time, not on the first ``next()``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Tuple

from .backtracking import array_count, array_trace
from .bitmask import bitmask_count, bitmask_trace
from .errors import UnsupportedStrategyError
from .trace import SOLUTION, TraceEvent
from .utils import validate_size

CountResult = Tuple[int, int, float]


class Strategy(NamedTuple):
    trace: Callable[[int, bool], Iterator[TraceEvent]]
    count: Callable[[int], CountResult]


STRATEGIES: Dict[str, Strategy] = {
    "array": Strategy(array_trace, array_count),
    "bitmask": Strategy(bitmask_trace, bitmask_count),
}

# Known totals for small boards (OEIS A000170), used for validation.
KNOWN_COUNTS: Dict[int, int] = {
    1: 1, 2: 0, 3: 0, 4: 2, 5: 10, 6: 4, 7: 40, 8: 92,
    9: 352, 10: 724, 11: 2680, 12: 14200, 13: 73712,
}


def normalize_strategy(strategy: Any) -> str:
    """Return the canonical strategy label or raise ``UnsupportedStrategyError``."""
    label = strategy.strip().lower() if isinstance(strategy, str) else None
    if label not in STRATEGIES:
        raise UnsupportedStrategyError(
            f"Unknown strategy {strategy!r}. Allowed: {', '.join(STRATEGIES)}"
        )
    return label


def iter_search(n: Any, strategy: str = "array", emit_attempts: bool = True) -> Iterator[TraceEvent]:
    """Return a lazy iterator over the search trace for an ``n`` x ``n`` board.

    The consumer pulls one event at a time and may stop whenever it likes;
    resuming continues the depth-first traversal exactly where it paused.
    """
    size = validate_size(n)
    label = normalize_strategy(strategy)
    return STRATEGIES[label].trace(size, bool(emit_attempts))


def search(n: Any, strategy: str = "array", emit_attempts: bool = True) -> List[TraceEvent]:
    """Return the complete, ordered search trace.

    Parameters
    ----------
    n : int
        Board size N (positive integer).
    strategy : str
        ``"array"`` or ``"bitmask"``; both yield the same trace.
    emit_attempts : bool
        Include an ``attempt`` event for every candidate tested.

    Returns
    -------
    list[TraceEvent]
        Events in depth-first pre-order; ``solution`` events appear in
        lexicographic order of their boards.
    """
    return list(iter_search(n, strategy, emit_attempts))


def timed_count(n: Any, strategy: str = "array") -> CountResult:
    """Return ``(solutions, nodes_explored, elapsed_seconds)`` without building a trace."""
    size = validate_size(n)
    label = normalize_strategy(strategy)
    return STRATEGIES[label].count(size)


def count_solutions(n: Any, strategy: str = "array") -> int:
    """Return the total number of solutions for an ``n`` x ``n`` board."""
    return timed_count(n, strategy)[0]


def find_solutions(n: Any, strategy: str = "array") -> List[Tuple[int, ...]]:
    """Return every solution board (``board[row] = col``) in lexicographic order."""
    events = iter_search(n, strategy, emit_attempts=False)
    return [event.board for event in events if event.kind == SOLUTION]
