"""Element type join for heterogeneous FrankenTuple contents."""

import numbers
from typing import Iterable, List, Never

# Narrowest first; spliced into numeric MROs just before ``object``
NUMERIC_TOWER = (
    numbers.Integral,
    numbers.Rational,
    numbers.Real,
    numbers.Complex,
    numbers.Number,
)


def _candidates(tp: type) -> List[type]:
    mro = list(tp.__mro__)
    if not issubclass(tp, numbers.Number):
        return mro
    tower = [abc for abc in NUMERIC_TOWER if issubclass(tp, abc) and abc not in mro]
    return mro[:-1] + tower + mro[-1:]


def common_supertype(types: Iterable[type]) -> type:
    """
    Compute the narrowest class that every given type is a subclass of.

    Numeric types also consider the ``numbers`` ABC tower so that ``int`` and
    ``float`` join to ``numbers.Real`` rather than ``object``. When several
    shared bases are equally narrow (``C(A, B)`` and ``D(B, A)`` share both
    ``A`` and ``B``), the result is the join of those bases, so the answer
    never depends on argument order.

    Args:
        types: Value types to join

    Returns:
        The joined type, or ``typing.Never`` when no types are given
    """
    distinct = list(dict.fromkeys(types))
    if not distinct:
        return Never
    if len(distinct) == 1:
        return distinct[0]

    ancestries = {tp: _candidates(tp) for tp in distinct}
    shared = [c for c in ancestries[distinct[0]] if all(c in ancestry for ancestry in ancestries.values())]
    narrowest = [c for c in shared if not any(other is not c and c in _candidates(other) for other in shared)]
    if len(narrowest) == 1:
        return narrowest[0]
    return common_supertype(narrowest)
