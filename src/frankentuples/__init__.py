"""
frankentuples

Defines FrankenTuple, a partially-named tuple comprised of a plain tuple and an
ordered mapping of named values, e.g. ``(1, 2; a=3, b=4)``. It acts like a
cross between the two, and can stand in for the argument list of a call.
"""

from .config import Settings
from .literal import LiteralSyntaxError, parse_ftuple
from .model import (
    EMPTY,
    EmptyError,
    FrankenIndexError,
    FrankenTuple,
    FrankenTupleError,
    NameNotFoundError,
    Pairs,
    ftuple,
)
from .signature import (
    CallShape,
    Signature,
    SignatureMismatchError,
    has_matching_signature,
    invoke,
    signatures_of,
)
from .typejoin import common_supertype

HybridTuple = FrankenTuple

__all__ = [
    "FrankenTuple",
    "HybridTuple",
    "Pairs",
    "ftuple",
    "parse_ftuple",
    "EMPTY",
    "common_supertype",
    "CallShape",
    "Signature",
    "signatures_of",
    "has_matching_signature",
    "invoke",
    "Settings",
    "FrankenTupleError",
    "FrankenIndexError",
    "NameNotFoundError",
    "EmptyError",
    "LiteralSyntaxError",
    "SignatureMismatchError",
]

__version__ = "0.1.0"
