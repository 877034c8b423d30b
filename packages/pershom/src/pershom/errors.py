"""
Exceptions raised by the reduction core.

Each error also derives from the builtin a caller would naturally catch,
so ``except ValueError`` keeps working for code that predates these.
"""


class PershomError(Exception):
    """Base class for all pershom errors."""


class FiltrationError(PershomError, ValueError):
    """
    Malformed filtration: a column references a row at or after its own
    position, a boundary repeats an index, or a dimension is negative.

    This is a caller contract violation, not an algorithmic failure.
    """

    def __init__(self, message: str, column: int = None, row: int = None):
        super().__init__(message)
        self.column = column
        self.row = row


class CapacityError(PershomError, OverflowError):
    """An index does not fit in the index type chosen for a column."""


class EmptyColumnError(PershomError, LookupError):
    """low() was requested on a column without entries."""
