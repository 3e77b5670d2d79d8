"""Column-array backtracking search for the N-Queens problem.

This module implements the exhaustive, iterative (non-recursive) backtracking
search over queen placements using a plain column array, and provides two
entry points:

- array_trace(size, emit_attempts=True): a lazy generator of ``TraceEvent``
    records describing every step of the search.
- array_count(size): the same traversal with every emission point removed,
    returning only the tally.

Implementation overview
-----------------------
- State representation: a size-length list ``board`` where ``board[row] = col``
    places a queen at (row, col); ``-1`` means the row is still undecided.
- Validity: the scan form ``is_safe`` compares the candidate with every queen
    in the rows above it, O(row) per test.
- Search strategy: depth-first search implemented iteratively with an explicit
    stack of decision frames, one per row being filled. The frame for row
    ``size`` is a leaf that reports a solution and is popped immediately.
- Order: rows are filled top to bottom and within a row columns are tried
    left to right, so solutions are produced in lexicographic order.

Contract (public API)
---------------------
- Input: ``size >= 1`` (validated by ``nqtrace.search``).
- ``array_trace`` output: events in depth-first pre-order. Per candidate the
    sequence is ``attempt`` (optional), then, when valid, ``placed``, the
    whole subtree, and ``backtrack``.
- ``array_count`` output: ``(solutions, nodes_explored, elapsed_seconds)``
    where ``nodes_explored`` counts placements and ``elapsed_seconds`` is
    wall-clock time measured via ``perf_counter()``.
- Determinism: results are identical for equal inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Iterator, List, Tuple

from .trace import ATTEMPT, BACKTRACK, PLACED, SOLUTION, TraceEvent
from .utils import UNSET, is_safe

CountResult = Tuple[int, int, float]


@dataclass
class _Frame:
    """Mutable stack frame capturing the state at a decision level."""

    row: int
    next_col: int = 0


def array_trace(size: int, emit_attempts: bool = True) -> Iterator[TraceEvent]:
    """Yield the full search trace using the column-array encoding.

    Parameters
    ----------
    size : int
        Board dimension N (N >= 1).
    emit_attempts : bool
        When True every candidate tested produces an ``attempt`` event before
        the validity test; when False only placements, backtracks and
        solutions are reported.

    Yields
    ------
    TraceEvent
        Events in depth-first pre-order. The generator may be abandoned at
        any point; the board is local to this call.
    """
    board: List[int] = [UNSET] * size
    stack: List[_Frame] = [_Frame(0)]

    while stack:
        frame = stack[-1]
        row = frame.row

        if row == size:
            yield TraceEvent(SOLUTION, tuple(board))
            stack.pop()
            continue

        if board[row] != UNSET:
            # Returning from the child frame: lift the queen placed at this row.
            col = board[row]
            board[row] = UNSET
            yield TraceEvent(BACKTRACK, tuple(board), row, col)

        if frame.next_col >= size:
            # All columns tried at this row; hand control back to the parent.
            stack.pop()
            continue

        col = frame.next_col
        frame.next_col = col + 1

        if emit_attempts:
            yield TraceEvent(ATTEMPT, tuple(board), row, col)

        if is_safe(board, row, col):
            board[row] = col
            yield TraceEvent(PLACED, tuple(board), row, col)
            # Descend one level deeper in the search tree.
            stack.append(_Frame(row + 1))


def array_count(size: int) -> CountResult:
    """Count all solutions via the column-array traversal, without a trace.

    Returns
    -------
    (solutions, nodes_explored, elapsed_seconds)
        - solutions: int, number of complete placements found.
        - nodes_explored: int, number of queens placed during the search.
        - elapsed_seconds: float, total wall time.
    """
    board = [UNSET] * size
    solutions = 0
    explored = 0
    row = 0
    col = 0
    start = perf_counter()

    # Advance row by row, backtracking when no safe column remains.
    while row >= 0:
        placed = False
        while col < size:
            if is_safe(board, row, col):
                board[row] = col
                explored += 1
                placed = True
                break
            col += 1

        if placed:
            if row == size - 1:
                # Leaf reached: tally it, then keep scanning the same row.
                solutions += 1
                board[row] = UNSET
                col += 1
                continue
            row += 1
            col = 0
            continue

        # Exhausted all columns in this row; undo the previous decision.
        row -= 1
        if row >= 0:
            col = board[row] + 1
            board[row] = UNSET

    return solutions, explored, perf_counter() - start
