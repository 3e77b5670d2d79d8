"""Trace event model shared by both search encodings.

A trace is the ordered sequence of events one full search emits, in strict
depth-first pre-order:

- ``attempt``: a candidate ``(row, col)`` is about to be tested (optional,
  see ``emit_attempts`` in ``nqtrace.search``);
- ``placed``: the candidate was valid and a queen now sits on it;
- ``backtrack``: the queen at ``(row, col)`` was lifted after its subtree
  was exhausted;
- ``solution``: every row holds a queen; the board is a complete solution.

Each event carries an immutable snapshot of the board taken at emission time.
For ``attempt`` the snapshot precedes the test, for ``placed`` it includes the
new queen and for ``backtrack`` it no longer does.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .utils import UNSET

ATTEMPT = "attempt"
PLACED = "placed"
BACKTRACK = "backtrack"
SOLUTION = "solution"

EVENT_KINDS: Tuple[str, ...] = (ATTEMPT, PLACED, BACKTRACK, SOLUTION)

# Compact vocabulary (place/remove) used by traces recorded without attempts.
KIND_ALIASES: Dict[str, str] = {
    "place": PLACED,
    "remove": BACKTRACK,
}


def normalize_kind(kind: str) -> str:
    """Map an event label (including the place/remove aliases) to its canonical kind."""
    label = str(kind).strip().lower()
    label = KIND_ALIASES.get(label, label)
    if label not in EVENT_KINDS:
        raise ValueError(f"Unknown trace event kind '{kind}'. Allowed: {', '.join(EVENT_KINDS)}")
    return label


@dataclass(frozen=True)
class TraceEvent:
    """Immutable record of one search step.

    Attributes
    ----------
    kind : str
        One of ``EVENT_KINDS``.
    board : tuple[int, ...]
        Snapshot with ``board[row] = col`` and ``UNSET`` for empty rows.
    row, col : int | None
        Coordinate acted on; both ``None`` for ``solution`` events.
    """

    kind: str
    board: Tuple[int, ...]
    row: Optional[int] = None
    col: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown trace event kind '{self.kind}'")
        if not isinstance(self.board, tuple):
            object.__setattr__(self, "board", tuple(self.board))
        has_coordinate = self.row is not None and self.col is not None
        if self.kind == SOLUTION:
            if self.row is not None or self.col is not None:
                raise ValueError("Solution events carry no coordinate")
        elif not has_coordinate:
            raise ValueError(f"'{self.kind}' events require both row and col")

    @property
    def coordinate(self) -> Optional[Tuple[int, int]]:
        if self.row is None or self.col is None:
            return None
        return self.row, self.col

    @property
    def is_solution(self) -> bool:
        return self.kind == SOLUTION

    @property
    def queens(self) -> int:
        """Number of queens on the snapshot."""
        return sum(1 for col in self.board if col != UNSET)

    def as_dict(self) -> Dict[str, Any]:
        """Plain-dict view for a presentation layer (board as a list)."""
        return {
            "kind": self.kind,
            "board": list(self.board),
            "row": self.row,
            "col": self.col,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TraceEvent":
        """Build an event from ``as_dict`` output; accepts place/remove labels."""
        return cls(
            kind=normalize_kind(data["kind"]),
            board=tuple(int(c) for c in data["board"]),
            row=data.get("row"),
            col=data.get("col"),
        )


def solutions_from_trace(events: Iterable[TraceEvent]) -> List[Tuple[int, ...]]:
    """Collect the boards of all ``solution`` events in trace order."""
    return [event.board for event in events if event.kind == SOLUTION]


def count_kinds(events: Iterable[TraceEvent]) -> Dict[str, int]:
    """Return the number of events per kind (every kind present, possibly 0)."""
    counter = Counter(event.kind for event in events)
    return {kind: counter.get(kind, 0) for kind in EVENT_KINDS}


def replay_boards(events: Iterable[TraceEvent], size: int) -> Iterator[Tuple[int, ...]]:
    """Rebuild the board after each event from placements and backtracks alone.

    Yields one board per event. Raises ``ValueError`` when the trace is not
    well-formed: a placement on an occupied row, a backtrack of a queen that
    is not there, or a solution reported on an incomplete board.
    """
    board = [UNSET] * size
    for index, event in enumerate(events):
        if event.kind == PLACED:
            if board[event.row] != UNSET:
                raise ValueError(f"Event {index}: row {event.row} already holds a queen")
            board[event.row] = event.col
        elif event.kind == BACKTRACK:
            if board[event.row] != event.col:
                raise ValueError(f"Event {index}: no queen at ({event.row}, {event.col}) to lift")
            board[event.row] = UNSET
        elif event.kind == SOLUTION:
            if UNSET in board:
                raise ValueError(f"Event {index}: solution reported on an incomplete board")
        yield tuple(board)
