"""Exception types raised by the search entry points.

Both errors derive from ``ValueError`` so callers that already guard user
input with ``except ValueError`` keep working unchanged.
"""

from __future__ import annotations


class NQueensTraceError(ValueError):
    """Base class for rejected search requests."""


class InvalidSizeError(NQueensTraceError):
    """Board size is not a positive integer."""


class UnsupportedStrategyError(NQueensTraceError):
    """Strategy label does not name a registered search encoding."""
