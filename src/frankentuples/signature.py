"""
Matching FrankenTuples against callable signatures.

A FrankenTuple can stand in for the argument list of a prospective call: its
positional portion supplies positional arguments and its named portion supplies
keyword arguments. This module decides whether a callable accepts such a call
and performs it.

Keyword arguments do not take part in dispatch, so only the *names* of the
named portion are considered, never the types of its values.
"""

from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .config import Settings
from .logging import get_logger

logger = get_logger(__name__)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

# PEP 484 numeric promotion: an annotation of the key accepts these types too
_NUMERIC_PROMOTIONS: Dict[type, Tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}


class SignatureMismatchError(TypeError):
    """Raised when no signature of a callable accepts a FrankenTuple."""


@dataclass(frozen=True)
class CallShape:
    """The positional argument types and keyword names of a prospective call."""
    positional_types: Tuple[type, ...] = ()
    names: Tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = [tp.__name__ for tp in self.positional_types]
        if self.names:
            return f"({', '.join(parts)}; {', '.join(self.names)})"
        return f"({', '.join(parts)})"


def _annotation_accepts(annotation: Any, tp: type, settings: Settings) -> bool:
    """Check whether a value of type ``tp`` satisfies ``annotation``."""
    if annotation is inspect.Parameter.empty or annotation is Any or annotation is object:
        return True
    if isinstance(annotation, str):
        # Forward reference that could not be resolved
        return True
    if isinstance(annotation, typing.TypeVar):
        if annotation.__bound__ is not None:
            return _annotation_accepts(annotation.__bound__, tp, settings)
        if annotation.__constraints__:
            return any(_annotation_accepts(c, tp, settings) for c in annotation.__constraints__)
        return True
    if isinstance(annotation, typing.NewType):
        return _annotation_accepts(annotation.__supertype__, tp, settings)
    if annotation is None:
        return tp is type(None)

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(_annotation_accepts(arg, tp, settings) for arg in args)
    if origin is typing.Annotated:
        return _annotation_accepts(args[0], tp, settings)
    if origin is typing.Literal:
        return any(issubclass(tp, type(value)) for value in args)
    if origin is not None:
        annotation = origin

    if isinstance(annotation, type):
        try:
            if issubclass(tp, annotation):
                return True
        except TypeError:
            # Non-runtime-checkable protocols refuse issubclass
            logger.debug(f"Treating {annotation!r} as unconstrained: {tp!r} cannot be checked against it")
            return True
        if settings.numeric_promotion:
            return any(issubclass(tp, promoted) for promoted in _NUMERIC_PROMOTIONS.get(annotation, ()))
        return False

    logger.debug(f"Treating unrecognised annotation {annotation!r} as unconstrained")
    return True


def _resolve_annotations(func: Callable) -> Dict[str, Any]:
    # A class is called through its constructor, not its attribute annotations
    target = func.__init__ if isinstance(func, type) else func
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        logger.debug(f"Could not resolve annotations of {func!r}: {exc}")
        return {}


@dataclass(frozen=True)
class Signature:
    """
    Descriptor of one way to call a callable.

    Holds the ordered ``inspect.Parameter`` list and the resolved annotation of
    each parameter. Parameters without a resolved annotation are unconstrained.
    """
    parameters: Tuple[inspect.Parameter, ...]
    annotations: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_callable(cls, func: Callable, overrides: Optional[Dict[str, Any]] = None) -> Signature:
        """
        Build a descriptor from a callable's declared interface.

        Args:
            func: Callable to introspect
            overrides: Annotations replacing the declared ones, by parameter name

        Raises:
            ValueError: If the callable's signature cannot be determined
            TypeError: If ``func`` is not a supported callable
        """
        sig = inspect.signature(func)
        annotations = {
            name: param.annotation
            for name, param in sig.parameters.items()
            if param.annotation is not inspect.Parameter.empty
        }
        annotations.update(_resolve_annotations(func))
        annotations.update(overrides or {})
        return cls(tuple(sig.parameters.values()), annotations)

    @property
    def slots(self) -> List[inspect.Parameter]:
        """Parameters that may be filled positionally, in order."""
        return [p for p in self.parameters if p.kind in _POSITIONAL_KINDS]

    @property
    def var_positional(self) -> Optional[inspect.Parameter]:
        for p in self.parameters:
            if p.kind is inspect.Parameter.VAR_POSITIONAL:
                return p
        return None

    @property
    def accepts_var_keyword(self) -> bool:
        return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in self.parameters)

    @property
    def keyword_only_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.kind is inspect.Parameter.KEYWORD_ONLY)

    def _accepts_positional_type(self, param: inspect.Parameter, tp: type, settings: Settings) -> bool:
        annotation = self.annotations.get(param.name, inspect.Parameter.empty)
        return _annotation_accepts(annotation, tp, settings)

    def accepts(self, shape: CallShape, settings: Optional[Settings] = None) -> bool:
        """
        Determine whether a call of the given shape matches this signature.

        Positional types must fit the positional parameters. Names must be a
        subset of the keyword-capable parameter names, unless the signature
        takes ``**kwargs``, in which case the declared keyword-only names must
        be a subset of the call's names. A call without names only needs its
        positional arguments to fit.
        """
        settings = settings or Settings()
        slots = self.slots
        var_positional = self.var_positional
        n = len(shape.positional_types)

        if n > len(slots) and var_positional is None:
            return False

        for i, tp in enumerate(shape.positional_types):
            param = slots[i] if i < len(slots) else var_positional
            if not self._accepts_positional_type(param, tp, settings):
                return False

        names = set(shape.names)
        filled = slots[:n]
        unfilled = slots[n:]

        for param in unfilled:
            if param.default is not inspect.Parameter.empty:
                continue
            if param.kind is inspect.Parameter.POSITIONAL_ONLY or param.name not in names:
                return False

        if not names:
            return True

        if any(p.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD and p.name in names for p in filled):
            return False

        if self.accepts_var_keyword:
            return set(self.keyword_only_names) <= names

        keyword_capable = set(self.keyword_only_names)
        keyword_capable.update(p.name for p in unfilled if p.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD)
        return names <= keyword_capable

    def __str__(self) -> str:
        return str(inspect.Signature(list(self.parameters)))


def _singledispatch_signatures(func: Callable) -> List[Signature]:
    signatures = []
    for cls, impl in func.registry.items():
        try:
            sig = inspect.signature(impl)
        except (ValueError, TypeError) as exc:
            logger.debug(f"Skipping uninspectable implementation {impl!r} for {cls!r}: {exc}")
            continue
        overrides = {}
        first = next((p for p in sig.parameters.values() if p.kind in _POSITIONAL_KINDS), None)
        if first is not None and cls is not object:
            overrides[first.name] = cls
        signatures.append(Signature.from_callable(impl, overrides))
    return signatures


def _overload_signatures(func: Callable) -> List[Signature]:
    if isinstance(func, types.FunctionType):
        return [Signature.from_callable(stub) for stub in typing.get_overloads(func)]
    if isinstance(func, types.MethodType) and isinstance(func.__func__, types.FunctionType):
        # Bind each stub like the implementation so the receiver is not a parameter
        return [
            Signature.from_callable(types.MethodType(stub, func.__self__))
            for stub in typing.get_overloads(func.__func__)
        ]
    return []


def signatures_of(func: Callable) -> Optional[List[Signature]]:
    """
    Collect every signature through which ``func`` can be called.

    ``typing.overload`` stubs take precedence, then the implementations
    registered with a ``functools.singledispatch`` function, then the
    callable's own signature. Overloads of bound methods and classmethods are
    found through the underlying function, without the bound receiver.

    Returns:
        The signatures, or None when ``func`` cannot be introspected (as for
        many builtins such as ``max`` and ``dict``)
    """
    overloads = _overload_signatures(func)
    if overloads:
        return overloads

    if hasattr(func, "registry") and hasattr(func, "dispatch"):
        return _singledispatch_signatures(func)

    try:
        return [Signature.from_callable(func)]
    except (ValueError, TypeError) as exc:
        logger.debug(f"No signature available for {func!r}: {exc}")
        return None


def _as_shape(ft: Any) -> CallShape:
    if isinstance(ft, CallShape):
        return ft
    return ft.shape


def _is_accepted(
    func: Callable,
    shape: CallShape,
    signatures: Optional[Iterable[Signature]],
    settings: Optional[Settings],
) -> bool:
    candidates = list(signatures) if signatures is not None else signatures_of(func)
    if candidates is None:
        logger.debug(f"Signature of {_callable_name(func)} is unknown, leaving {shape} to the call")
        return True
    for sig in candidates:
        if sig.accepts(shape, settings):
            logger.debug(f"{_callable_name(func)}{sig} accepts {shape}")
            return True
    logger.debug(f"None of {len(candidates)} signatures of {_callable_name(func)} accept {shape}")
    return False


def _callable_name(func: Callable) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def has_matching_signature(
    func: Callable,
    ft: Any,
    *,
    signatures: Optional[Iterable[Signature]] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Determine whether ``func`` can be called with the arguments described by ``ft``.

    The positional types of ``ft`` must fit some signature of ``func``, and the
    names of its named portion must be acceptable keyword arguments for that
    signature. The types of named values are not considered. A FrankenTuple
    with no names matches whenever its positional portion does.

    A callable whose signature cannot be introspected is not rejected: the
    result is True and the call itself decides.

    Args:
        func: Callable to inspect
        ft: FrankenTuple value or CallShape describing the call
        signatures: Explicit signatures to use instead of introspecting ``func``
        settings: Matching settings (defaults to ``Settings()``)

    Returns:
        True if a matching signature exists, or the signature is unknown

    Examples:
        >>> def f(x: int, *, y=3, z=4): return x + y + z
        >>> has_matching_signature(f, CallShape((int,), ("y",)))
        True
        >>> has_matching_signature(f, CallShape((int,), ("a",)))
        False
    """
    return _is_accepted(func, _as_shape(ft), signatures, settings)


def invoke(
    func: Callable,
    ft: Any,
    *,
    signatures: Optional[Iterable[Signature]] = None,
    settings: Optional[Settings] = None,
) -> Any:
    """
    Call ``func`` with the positional portion of ``ft`` as positional arguments
    and its named portion as keyword arguments.

    Callables that cannot be introspected are called directly. Exceptions
    raised by ``func`` propagate unchanged.

    Raises:
        SignatureMismatchError: If no signature of ``func`` accepts ``ft``
    """
    shape = ft.shape
    if not _is_accepted(func, shape, signatures, settings):
        raise SignatureMismatchError(
            f"No signature of {_callable_name(func)} accepts arguments {shape}"
        )
    return func(*ft.positional, **ft.named)
