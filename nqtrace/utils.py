"""Validity predicates and board helpers for the N-Queens search engine.

This module provides the low-level primitives that both search encodings
depend upon: the placement test in its two equivalent forms, whole-board
conflict counting, and boundary validation of the board size.

Representation
--------------
Boards are encoded as a 1D list where ``board[row] = col``; ``UNSET`` (-1)
marks a row that has not been decided yet. Rows are filled in order, so a
partial board at depth ``row`` has entries ``0..row-1`` set.
"""

from __future__ import annotations

import numbers
from collections import Counter
from typing import Any, Sequence, Tuple

from .errors import InvalidSizeError

UNSET = -1


def is_safe(board: Sequence[int], row: int, col: int) -> bool:
    """Return True if a queen at ``(row, col)`` attacks no queen above it.

    Scan form of the predicate: every decided row ``r < row`` is checked for a
    column clash (``board[r] == col``) or a diagonal clash
    (``|board[r] - col| == row - r``). Cost is O(row).
    """
    for prev in range(row):
        placed = board[prev]
        if placed == col or abs(placed - col) == row - prev:
            return False
    return True


def mask_is_safe(columns: int, diag1: int, diag2: int, col: int) -> bool:
    """Return True if bit ``col`` is clear in the union of the three masks.

    Bitmask form of the predicate, O(1). The masks must already be projected
    onto the row being filled (see ``masks_from_board``).
    """
    return not ((columns | diag1 | diag2) >> col) & 1


def masks_from_board(board: Sequence[int], row: int, size: int) -> Tuple[int, int, int]:
    """Derive ``(columns, diag1, diag2)`` for the first ``row`` entries of a board.

    Each queen at ``(r, c)`` occupies column bit ``c``; projected onto row
    ``row`` it attacks column ``c + (row - r)`` along one diagonal family and
    ``c - (row - r)`` along the other. Projections falling off the board are
    dropped, which matches the incremental shift-and-trim maintenance done by
    the bitmask search.
    """
    columns = diag1 = diag2 = 0
    for r in range(row):
        c = board[r]
        distance = row - r
        columns |= 1 << c
        if c + distance < size:
            diag1 |= 1 << (c + distance)
        if c - distance >= 0:
            diag2 |= 1 << (c - distance)
    return columns, diag1, diag2


def conflicts(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N).

    Counts occurrences per column and per diagonal with hash maps; rows are
    unique by construction of the encoding.
    """
    col_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for row, col in enumerate(board):
        col_count[col] += 1
        diag1[col - row] += 1
        diag2[col + row] += 1

    def _pairs(counter: Counter[int]) -> int:
        total = 0
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
        return total

    return _pairs(col_count) + _pairs(diag1) + _pairs(diag2)


def conflicts_on2(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N^2).

    Reference implementation for validation; prefer ``conflicts``.
    """
    n = len(board)
    conflicts_count = 0
    for i in range(n):
        for j in range(i + 1, n):
            if board[i] == board[j] or abs(board[i] - board[j]) == abs(i - j):
                conflicts_count += 1
    return conflicts_count


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if the board is a complete, non-attacking placement.

    Contract
    - Input: sequence of length N where board[row] = col (0-based indices)
    - Valid if: every entry lies in ``[0, N)`` and no two queens attack
      each other
    """
    n = len(board)
    if n == 0:
        return False
    for col in board:
        if isinstance(col, bool) or not isinstance(col, int):
            return False
        if col < 0 or col >= n:
            return False
    return conflicts(board) == 0


def validate_size(n: Any) -> int:
    """Return ``n`` as a plain ``int`` or raise ``InvalidSizeError``.

    Accepts any integral number (``int``, numpy integers) that is at least 1.
    Booleans, floats, strings and other objects are rejected; use
    ``parse_size`` for user-entered text.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidSizeError(f"Board size must be a positive integer, got {n!r}")
    size = int(n)
    if size < 1:
        raise InvalidSizeError(f"Board size must be a positive integer, got {size}")
    return size


def parse_size(text: Any) -> int:
    """Parse a user-supplied board size (e.g. from a form field or CLI flag).

    Integral floats such as ``8.0`` (or the text ``"8.0"``) are accepted;
    anything non-numeric, fractional, zero or negative raises
    ``InvalidSizeError``.
    """
    if isinstance(text, numbers.Integral) and not isinstance(text, bool):
        return validate_size(text)
    if isinstance(text, float):
        value = text
    else:
        raw = str(text).strip()
        try:
            return validate_size(int(raw))
        except ValueError:
            pass
        try:
            value = float(raw)
        except ValueError:
            raise InvalidSizeError(f"Board size must be a positive integer, got {text!r}") from None
    if not value.is_integer():
        raise InvalidSizeError(f"Board size must be a positive integer, got {text!r}")
    return validate_size(int(value))
