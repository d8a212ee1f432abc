"""Query-related types and enumerations.

These types describe how two tables are combined (join method and match
key) and how membership tests compare values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from condense.domain.exceptions import (
    InvalidJoinMethodError,
    InvalidMatchSpecificationError,
)


class JoinMethod(str, Enum):
    """Join algorithms.

    INNER enumerates every matching (left, right) pair. LEFT and RIGHT
    keep exactly one output row per row of the preserved side: merged
    with the first match, or alone when nothing matches. FULL is the
    de-duplicated concatenation of LEFT and RIGHT.
    """

    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"

    @classmethod
    def parse(cls, method: JoinMethod | str) -> JoinMethod:
        """Resolve a method name (case-insensitive) to a JoinMethod."""
        if isinstance(method, JoinMethod):
            return method
        if isinstance(method, str):
            try:
                return cls(method.lower())
            except ValueError:
                pass
        valid = ", ".join(m.value for m in cls)
        raise InvalidJoinMethodError(f"Unknown join method {method!r} (expected one of: {valid})")


class EqualityMode(str, Enum):
    """How where_in() compares a field against the candidate values."""

    STRICT = "strict"
    """Type and value must both match."""

    LOOSE = "loose"
    """Python equality: 1, 1.0 and True are interchangeable."""


@dataclass(frozen=True, slots=True)
class MatchKey:
    """The single equality key of a join.

    Attributes:
        left_field: Field read from rows of the left table
        right_field: Field read from rows of the right table

    Example:
        >>> MatchKey.parse({"dept": "dept_id"})
        MatchKey(left_field='dept', right_field='dept_id')
    """

    left_field: str
    right_field: str

    def __post_init__(self) -> None:
        """Validate the field names."""
        for name in (self.left_field, self.right_field):
            if not isinstance(name, str) or not name:
                raise InvalidMatchSpecificationError(
                    f"Match fields must be non-empty strings, got {name!r}"
                )

    @classmethod
    def parse(cls, spec: MatchKey | Mapping[str, str] | tuple | list | Any) -> MatchKey:
        """Build a MatchKey from any accepted spelling.

        Accepted forms are a MatchKey, a ``(left, right)`` pair, or a
        mapping with exactly one ``{left: right}`` entry. Mappings with
        several entries are rejected rather than silently truncated.

        Raises:
            InvalidMatchSpecificationError: For any other input.
        """
        if isinstance(spec, MatchKey):
            return spec

        if isinstance(spec, Mapping):
            if len(spec) != 1:
                raise InvalidMatchSpecificationError(
                    f"Match specification must hold exactly one field pair, got {len(spec)}"
                )
            ((left, right),) = spec.items()
            return cls(left, right)

        if isinstance(spec, (tuple, list)):
            if len(spec) != 2:
                raise InvalidMatchSpecificationError(
                    f"Match specification must be a (left, right) pair, got {len(spec)} items"
                )
            return cls(spec[0], spec[1])

        raise InvalidMatchSpecificationError(f"Unsupported match specification: {spec!r}")
