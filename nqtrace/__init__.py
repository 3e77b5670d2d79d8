"""N-Queens backtracking search with a replayable event trace."""

from .backtracking import array_count, array_trace
from .bitmask import SearchState, bitmask_count, bitmask_trace
from .errors import InvalidSizeError, NQueensTraceError, UnsupportedStrategyError
from .search import (
    KNOWN_COUNTS,
    STRATEGIES,
    count_solutions,
    find_solutions,
    iter_search,
    normalize_strategy,
    search,
    timed_count,
)
from .trace import (
    ATTEMPT,
    BACKTRACK,
    EVENT_KINDS,
    PLACED,
    SOLUTION,
    TraceEvent,
    count_kinds,
    replay_boards,
    solutions_from_trace,
)
from .utils import (
    UNSET,
    conflicts,
    conflicts_on2,
    is_safe,
    is_valid_solution,
    mask_is_safe,
    masks_from_board,
    parse_size,
    validate_size,
)

__all__ = [
    "search",
    "iter_search",
    "count_solutions",
    "timed_count",
    "find_solutions",
    "normalize_strategy",
    "STRATEGIES",
    "KNOWN_COUNTS",
    "array_trace",
    "array_count",
    "bitmask_trace",
    "bitmask_count",
    "SearchState",
    "TraceEvent",
    "ATTEMPT",
    "PLACED",
    "BACKTRACK",
    "SOLUTION",
    "EVENT_KINDS",
    "count_kinds",
    "replay_boards",
    "solutions_from_trace",
    "UNSET",
    "is_safe",
    "mask_is_safe",
    "masks_from_board",
    "conflicts",
    "conflicts_on2",
    "is_valid_solution",
    "validate_size",
    "parse_size",
    "NQueensTraceError",
    "InvalidSizeError",
    "UnsupportedStrategyError",
]
