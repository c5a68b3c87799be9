"""Fixed-capacity, immutable result containers for root finding and curve queries.

Every solver and extrema query returns one of these small value types instead of a
growing list. A container holds a ``count`` of valid values (at most its capacity);
only these values can be accessed, anything beyond ``count`` raises an ``IndexError``.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Generic, Iterator, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")


###############################################################################
# _ResultsMax
###############################################################################
class _ResultsMax(Generic[T]):
    """Base class holding up to ``capacity`` values in a fixed tuple slot."""

    __slots__ = ("_values",)

    capacity: ClassVar[int] = 0

    _values: Tuple[T, ...]

    def __init__(self, *values: T):
        """Initialize the container with 0..capacity values.

        Args:
            *values: The valid values, in order

        Raises:
            ValueError: If more values than the capacity are given
        """
        if len(values) > self.capacity:
            raise ValueError(f"{type(self).__name__} holds at most {self.capacity} values, got {len(values)}")
        object.__setattr__(self, "_values", tuple(values))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def count(self) -> int:
        """int: The number of valid values."""
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> T:
        """Return the valid value at ``index``.

        Args:
            index: Position in the range ``0 <= index < count``

        Raises:
            TypeError: If index is not an integer
            IndexError: If index is outside the valid range
        """
        if not isinstance(index, int):
            raise TypeError(f"{type(self).__name__} indices must be integers, not {type(index).__name__}")
        if 0 <= index < len(self._values):
            return self._values[index]
        raise IndexError(f"{type(self).__name__} index {index} out of range, count is {len(self._values)}")

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(v) for v in self._values)})"

    def to_tuple(self) -> Tuple[T, ...]:
        """Return the valid values as a plain tuple."""
        return self._values

    def add(self, value: T):
        """Return a copy of these results with one more value appended.

        The container itself is not modified.

        Raises:
            IndexError: If the container is already full
        """
        if len(self._values) >= self.capacity:
            raise IndexError(f"Can't add more than {self.capacity} values to {type(self).__name__}")
        return type(self)(*self._values, value)

    def where(self, predicate: Callable[[T], bool]):
        """Return a copy holding only the values for which ``predicate`` is true."""
        return type(self)(*(v for v in self._values if predicate(v)))

    def map(self, function: Callable[[T], U]):
        """Return a container of the same capacity holding ``function(value)`` for each value."""
        return type(self)(*(function(v) for v in self._values))


###############################################################################
# ResultsMax2
###############################################################################
class ResultsMax2(_ResultsMax[T]):
    """Contains either 0, 1 or 2 valid values."""

    __slots__ = ()
    capacity: ClassVar[int] = 2


###############################################################################
# ResultsMax3
###############################################################################
class ResultsMax3(_ResultsMax[T]):
    """Contains either 0, 1, 2 or 3 valid values."""

    __slots__ = ()
    capacity: ClassVar[int] = 3

    @classmethod
    def from_results_max2(cls, results: ResultsMax2[T]) -> ResultsMax3[T]:
        """Widen a ResultsMax2 into a ResultsMax3 holding the same values."""
        return cls(*results)
