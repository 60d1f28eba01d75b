# core/errors.py

"""
Exception types raised by the grading and attendance computations.

Each domain error also subclasses `ValueError`, so callers that already guard validator
calls with `except ValueError` keep working, while the `Ledger` can still tell them apart
and map them to a specific `ErrorCode`.
"""


class LedgerError(Exception):
    """Base class for grading and attendance errors."""


class InvalidMarksError(LedgerError, ValueError):
    """Raised when internal or external marks fall outside their declared range."""


class InconsistentCreditsError(LedgerError, ValueError):
    """Raised when a non-positive credit value reaches a weighted-average calculation."""


class InvalidStatusError(LedgerError, ValueError):
    """Raised when an attendance status is not Present, Absent, or Late."""


class PermissionDeniedError(LedgerError):
    """Raised when a session is not allowed to view the requested records."""
