"""
Exceptions raised by the table engine and its collaborators.
"""

from __future__ import annotations


class CondenseError(Exception):
    """Base class for every error raised by this package."""

    pass


class CorruptDataError(CondenseError, ValueError):
    """
    Raised when a stored blob cannot be decoded into a table.

    Covers both undecodable bytes and well-formed documents that are not
    a list of rows.
    """

    def __init__(self, reason: str, location: str | None = None):
        """
        Initialize corruption error.

        Args:
            reason: What was wrong with the data.
            location: Where the data came from, if known.
        """
        self.reason = reason
        self.location = location
        where = f" in {location}" if location else ""
        super().__init__(f"Corrupt table data{where}: {reason}")


class DecryptionError(CondenseError):
    """Raised when ciphertext fails authentication (wrong key or tampering)."""

    pass


class IndexOutOfRangeError(CondenseError, IndexError):
    """Raised when a mutation addresses a row index that does not exist."""

    def __init__(self, index: object, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Row index {index!r} out of range for table of {size} rows")


class NotFoundError(CondenseError, LookupError):
    """Raised by first/last when the projected table has no rows."""

    pass


class InvalidMatchSpecificationError(CondenseError, ValueError):
    """Raised when a join is given anything other than one field pair."""

    pass


class InvalidJoinMethodError(CondenseError, ValueError):
    """Raised for a join method outside inner/left/right/full."""

    pass


class InvalidPatternError(CondenseError, ValueError):
    """Raised when a like() pattern is not a valid delimited expression."""

    pass
