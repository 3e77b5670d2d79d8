"""Bitmask backtracking search for the N-Queens problem.

The partial placement is summarized by three integers confined to the low
``size`` bits:

- ``columns``: bit ``c`` set when column ``c`` already holds a queen;
- ``diag1``: columns attacked on the current row along the down-right
  diagonals (shifted left by one per row);
- ``diag2``: columns attacked along the down-left diagonals (shifted right
  by one per row).

The union of the masks gives the blocked columns of a whole row at once, and
``avail & -avail`` extracts the lowest free column, so candidates come out in
ascending column order exactly like the column-array search. The masks are
derived state; the ``board`` list is kept alongside only to produce event
snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Iterator, List, Sequence, Tuple

from .trace import ATTEMPT, BACKTRACK, PLACED, SOLUTION, TraceEvent
from .utils import UNSET, mask_is_safe, masks_from_board

CountResult = Tuple[int, int, float]


@dataclass(frozen=True)
class SearchState:
    """Occupancy masks projected onto the row about to be filled."""

    size: int
    columns: int = 0
    diag1: int = 0
    diag2: int = 0

    @property
    def full(self) -> int:
        return (1 << self.size) - 1

    @property
    def blocked(self) -> int:
        return self.columns | self.diag1 | self.diag2

    @property
    def available(self) -> int:
        return self.full & ~self.blocked

    @property
    def depth(self) -> int:
        """Number of queens placed so far."""
        return bin(self.columns).count("1")

    def is_free(self, col: int) -> bool:
        return mask_is_safe(self.columns, self.diag1, self.diag2, col)

    def place(self, col: int) -> "SearchState":
        """Return the state for the next row after a queen lands on ``col``."""
        bit = 1 << col
        full = self.full
        return SearchState(
            self.size,
            self.columns | bit,
            ((self.diag1 | bit) << 1) & full,
            (self.diag2 | bit) >> 1,
        )

    @classmethod
    def from_board(cls, board: Sequence[int], row: int) -> "SearchState":
        """Derive the state of a partial board whose first ``row`` entries are set."""
        columns, diag1, diag2 = masks_from_board(board, row, len(board))
        return cls(len(board), columns, diag1, diag2)


def _candidates(state: SearchState, emit_attempts: bool) -> Iterator[int]:
    """Columns to visit at this row, ascending.

    Every column is visited when attempts are reported (blocked ones
    included); otherwise only the free ones, via lowest-set-bit extraction.
    """
    if emit_attempts:
        yield from range(state.size)
        return
    avail = state.available
    while avail:
        bit = avail & -avail
        avail ^= bit
        yield bit.bit_length() - 1


def _trace_row(
    board: List[int], row: int, state: SearchState, emit_attempts: bool
) -> Iterator[TraceEvent]:
    size = state.size
    if row == size:
        yield TraceEvent(SOLUTION, tuple(board))
        return

    for col in _candidates(state, emit_attempts):
        if emit_attempts:
            yield TraceEvent(ATTEMPT, tuple(board), row, col)
            if not state.is_free(col):
                continue
        board[row] = col
        yield TraceEvent(PLACED, tuple(board), row, col)
        yield from _trace_row(board, row + 1, state.place(col), emit_attempts)
        board[row] = UNSET
        yield TraceEvent(BACKTRACK, tuple(board), row, col)


def bitmask_trace(size: int, emit_attempts: bool = True) -> Iterator[TraceEvent]:
    """Yield the full search trace using the bitmask encoding.

    Produces exactly the same event sequence as
    ``nqtrace.backtracking.array_trace`` for the same arguments. Recursion
    depth is ``size + 1``.
    """
    board = [UNSET] * size
    yield from _trace_row(board, 0, SearchState(size), emit_attempts)


def bitmask_count(size: int) -> CountResult:
    """Count all solutions with the bitmask traversal, without a trace.

    Returns
    -------
    (solutions, nodes_explored, elapsed_seconds)
        Same contract as ``nqtrace.backtracking.array_count``.
    """
    full = (1 << size) - 1
    solutions = 0
    explored = 0
    start = perf_counter()

    def solve(columns: int, diag1: int, diag2: int) -> None:
        nonlocal solutions, explored
        if columns == full:
            solutions += 1
            return
        avail = full & ~(columns | diag1 | diag2)
        while avail:
            bit = avail & -avail
            avail ^= bit
            explored += 1
            solve(columns | bit, ((diag1 | bit) << 1) & full, (diag2 | bit) >> 1)

    solve(0, 0, 0)
    return solutions, explored, perf_counter() - start
