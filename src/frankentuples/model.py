"""
The FrankenTuple data type.

A FrankenTuple is a partially-named tuple: a plain tuple of unnamed values
followed by an ordered mapping of named values, e.g. ``(1, 2; a=3, b=4)``.
It behaves like a cross between ``tuple`` and a keyword-argument mapping.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional, Tuple, Union

from .signature import CallShape
from .typejoin import common_supertype

Key = Union[int, str]


class FrankenTupleError(Exception):
    """Base class for errors raised when accessing a FrankenTuple."""


class FrankenIndexError(FrankenTupleError, IndexError):
    """Raised when an integer index falls outside ``[1, len(ft)]``."""


class NameNotFoundError(FrankenTupleError, KeyError):
    """Raised when a name is not present in the named part."""


class EmptyError(FrankenTupleError, ValueError):
    """Raised when an operation needs at least one element."""


def _collect_named(named: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]) -> dict:
    if named is None:
        return {}
    items = named.items() if isinstance(named, Mapping) else named

    collected = {}
    for name, value in items:
        if not isinstance(name, str):
            raise TypeError(f"FrankenTuple names must be str, got {type(name).__name__}: {name!r}")
        if name in collected:
            raise ValueError(f"Duplicate name in FrankenTuple: {name!r}")
        collected[name] = value
    return collected


class Pairs:
    """
    Restartable view associating the keys of a FrankenTuple with its values.

    Each iteration starts from the beginning and yields ``(key, value)`` tuples
    lazily; integer keys come first, then names.
    """

    __slots__ = ("_ft",)

    def __init__(self, ft: FrankenTuple) -> None:
        self._ft = ft

    def __iter__(self) -> Iterator[Tuple[Key, Any]]:
        for i, value in enumerate(self._ft.positional, start=1):
            yield i, value
        yield from self._ft.named.items()

    def __len__(self) -> int:
        return len(self._ft)

    def __repr__(self) -> str:
        return f"Pairs({self._ft!r})"


class FrankenTuple:
    """
    A tuple whose trailing elements may be named.

    The unnamed portion is available as ``positional`` and the named portion as
    ``named``. Iteration yields the positional values first, then the named
    values in insertion order. Integer indices are 1-based over that combined
    order; string keys look up the named portion.

    Instances are immutable: operations such as :meth:`tail` return a new
    FrankenTuple.

    Examples:
        >>> ft = FrankenTuple((1, 2), {"a": 3, "b": 4})
        >>> ft.keys()
        (1, 2, 'a', 'b')
        >>> ft[3], ft["a"], ft.a
        (3, 3, 3)
    """

    __slots__ = ("_positional", "_named")

    def __init__(
        self,
        positional: Iterable[Any] = (),
        named: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None] = None,
    ) -> None:
        object.__setattr__(self, "_positional", tuple(positional))
        object.__setattr__(self, "_named", MappingProxyType(_collect_named(named)))

    @classmethod
    def build(cls, args: Iterable[Any] = (), kwargs: Optional[Mapping[str, Any]] = None) -> FrankenTuple:
        """Construct from an argument list and a keyword mapping, as a call would receive them."""
        return cls(args, kwargs)

    @property
    def positional(self) -> Tuple[Any, ...]:
        """The unnamed portion."""
        return self._positional

    @property
    def named(self) -> Mapping[str, Any]:
        """The named portion, as a read-only ordered mapping."""
        return self._named

    @property
    def shape(self) -> CallShape:
        """Positional value types and names, as used for signature matching."""
        return CallShape(
            positional_types=tuple(type(value) for value in self._positional),
            names=tuple(self._named),
        )

    # Immutability

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"FrankenTuple is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"FrankenTuple is immutable; cannot delete {name!r}")

    def __reduce__(self):
        return (self.__class__, (self._positional, dict(self._named)))

    # Collection protocol

    def __len__(self) -> int:
        return len(self._positional) + len(self._named)

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __iter__(self) -> Iterator[Any]:
        yield from self._positional
        yield from self._named.values()

    def __getitem__(self, key: Key) -> Any:
        if isinstance(key, bool):
            raise TypeError("FrankenTuple indices must be int or str, not bool")
        if isinstance(key, int):
            n_positional = len(self._positional)
            if not 1 <= key <= len(self):
                raise FrankenIndexError(
                    f"FrankenTuple index {key} out of range [1, {len(self)}]"
                )
            if key <= n_positional:
                return self._positional[key - 1]
            return self.values()[key - 1]
        if isinstance(key, str):
            try:
                return self._named[key]
            except KeyError:
                raise NameNotFoundError(key) from None
        raise TypeError(
            f"FrankenTuple indices must be int or str, not {type(key).__name__}"
        )

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._named[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute or name {name!r}"
            ) from None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrankenTuple):
            return NotImplemented
        return (
            self._positional == other._positional
            and tuple(self._named.items()) == tuple(other._named.items())
        )

    def __hash__(self) -> int:
        return hash((FrankenTuple, self._positional, tuple(self._named.items())))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._positional!r}, {dict(self._named)!r})"

    # Accessors

    def is_empty(self) -> bool:
        """Check whether both the positional and named portions are empty."""
        return not self._positional and not self._named

    def keys(self) -> Tuple[Key, ...]:
        """
        Get the valid keys of this FrankenTuple.

        The positional portion is keyed by 1-based integers and the named
        portion by name.

        Examples:
            >>> ftuple(1, 2, a=3, b=4).keys()
            (1, 2, 'a', 'b')
        """
        return tuple(range(1, len(self._positional) + 1)) + tuple(self._named)

    def values(self) -> Tuple[Any, ...]:
        """Get the values in iteration order: positional values, then named values."""
        return self._positional + tuple(self._named.values())

    def pairs(self) -> Pairs:
        """Get a restartable ``(key, value)`` view in iteration order."""
        return Pairs(self)

    def get(self, key: Key, default: Any = None) -> Any:
        try:
            return self[key]
        except (FrankenIndexError, NameNotFoundError):
            return default

    def first_index(self) -> int:
        return 1

    def last_index(self) -> int:
        return len(self)

    def first(self) -> Any:
        """
        Get the first value in iteration order.

        Raises:
            EmptyError: If the FrankenTuple has no elements
        """
        if self._positional:
            return self._positional[0]
        for value in self._named.values():
            return value
        raise EmptyError("first() of an empty FrankenTuple")

    def tail(self) -> FrankenTuple:
        """
        Return a new FrankenTuple with the first element removed.

        The first positional value is dropped if there is one; otherwise the
        first named entry is.

        Examples:
            >>> ftuple(a=4, b=5).tail()
            FrankenTuple((), {'b': 5})

        Raises:
            EmptyError: If the FrankenTuple has no elements
        """
        if self._positional:
            return FrankenTuple(self._positional[1:], self._named)
        if self._named:
            return FrankenTuple((), list(self._named.items())[1:])
        raise EmptyError("tail() of an empty FrankenTuple")

    def empty(self) -> FrankenTuple:
        """Return the canonical empty FrankenTuple."""
        return EMPTY

    def eltype(self) -> type:
        """
        Determine the element type: the narrowest common supertype of all values.

        Examples:
            >>> ftuple(1, 2, a=3).eltype()
            <class 'int'>
            >>> ftuple(1, a=2.0).eltype()
            <class 'numbers.Real'>
        """
        return common_supertype(type(value) for value in self)


EMPTY = FrankenTuple()


def ftuple(*args: Any, **kwargs: Any) -> FrankenTuple:
    """
    Construct a FrankenTuple from the given positional and keyword arguments.

    Examples:
        >>> ftuple(1, 2)
        FrankenTuple((1, 2), {})
        >>> ftuple(1, 2, a=3, b=4)
        FrankenTuple((1, 2), {'a': 3, 'b': 4})
    """
    return FrankenTuple(args, kwargs)
