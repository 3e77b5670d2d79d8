"""Terminal rendering and paced playback of search traces.

The board is drawn with box characters, one queen glyph per placed row. The
cell acted on by the current event is marked: ``?`` for an attempt on an
empty cell, ``x`` for a lifted queen.
"""
from __future__ import annotations

import sys
import time
from typing import Callable, Iterable, Optional, Sequence, TextIO

from . import settings
from nqtrace.trace import ATTEMPT, BACKTRACK, PLACED, SOLUTION, TraceEvent
from nqtrace.utils import UNSET

QUEEN = " ♛ "
EMPTY = "   "
ATTEMPT_MARK = " ? "
LIFTED_MARK = " x "


def render_board(board: Sequence[int], event: Optional[TraceEvent] = None) -> str:
    """Return a multi-line drawing of ``board`` (``board[row] = col``)."""
    size = len(board)
    uline = "┌" + "┬".join(["───"] * size) + "┐"
    mline = "├" + "┼".join(["───"] * size) + "┤"
    bline = "└" + "┴".join(["───"] * size) + "┘"
    marked = event.coordinate if event is not None else None

    hline = uline
    lines = []
    for row in range(size):
        lines.append(hline)
        hline = mline
        cells = []
        for col in range(size):
            if board[row] == col:
                cells.append(QUEEN)
            elif marked == (row, col) and event.kind == ATTEMPT:
                cells.append(ATTEMPT_MARK)
            elif marked == (row, col) and event.kind == BACKTRACK:
                cells.append(LIFTED_MARK)
            else:
                cells.append(EMPTY)
        lines.append("│" + "│".join(cells) + "│")
    lines.append(bline)
    return "\n".join(lines)


def describe_event(event: TraceEvent) -> str:
    """One-line caption for an event."""
    if event.kind == SOLUTION:
        return "solution: " + " ".join(str(col) for col in event.board)
    if event.kind == ATTEMPT:
        return f"attempt   row {event.row}, col {event.col}"
    if event.kind == PLACED:
        return f"placed    row {event.row}, col {event.col}"
    return f"backtrack row {event.row}, col {event.col}"


def play_trace(
    events: Iterable[TraceEvent],
    delay: Optional[float] = None,
    stream: Optional[TextIO] = None,
    sleep: Callable[[float], None] = time.sleep,
    limit: Optional[int] = None,
) -> int:
    """Print each event with its board, pausing ``delay`` seconds between frames.

    Solution frames get an extra hold of ``delay * settings.SOLUTION_PAUSE_FACTOR``
    on top of the regular pause.
    Stops after ``limit`` events when given. Returns the number of frames shown.
    """
    out = stream if stream is not None else sys.stdout
    pause = settings.PLAYBACK_DELAY if delay is None else delay
    solutions = 0
    shown = 0
    for step, event in enumerate(events):
        if limit is not None and shown >= limit:
            break
        if event.kind == SOLUTION:
            solutions += 1
        out.write(f"[step {step}] {describe_event(event)}  (solutions so far: {solutions})\n")
        out.write(render_board(event.board, event) + "\n")
        out.flush()
        shown += 1
        if pause > 0:
            hold = 1.0 + settings.SOLUTION_PAUSE_FACTOR if event.kind == SOLUTION else 1.0
            sleep(pause * hold)
    return shown


def render_solutions(solutions: Iterable[Sequence[int]], stream: Optional[TextIO] = None) -> int:
    """Print a gallery of solution boards. Returns how many were printed."""
    out = stream if stream is not None else sys.stdout
    count = 0
    for index, board in enumerate(solutions, start=1):
        if UNSET in board:
            raise ValueError(f"Solution {index} is incomplete: {list(board)}")
        out.write(f"Solution {index}: {' '.join(str(col) for col in board)}\n")
        out.write(render_board(board) + "\n")
        count += 1
    return count
