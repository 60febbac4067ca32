"""
Parsing of partially-named tuple literals.

A literal lists positional and ``name=value`` items separated by commas, e.g.
``(1, a=3, 2, b=4)``. It may instead be sectioned like a function signature,
with a semicolon separating the positional items from the named ones:
``(1, 2; a=3, b=4)``. Both forms produce the same FrankenTuple: positional
items keep their relative order, as do named items, wherever they occur.

Values must be Python literals. Bare identifiers are looked up in an optional
namespace; nothing is ever evaluated.
"""

import ast
import io
import keyword
import tokenize
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .config import Settings
from .logging import get_logger
from .model import FrankenTuple

logger = get_logger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_SKIPPED_TOKENS = {
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.COMMENT,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENDMARKER,
}
_LITERAL_NAMES = {"True", "False", "None"}


class LiteralSyntaxError(ValueError):
    """Raised when a FrankenTuple literal cannot be parsed."""

    def __init__(self, message: str, item: Optional[str] = None) -> None:
        if item is not None:
            message = f"{message}: {item!r}"
        super().__init__(message)
        self.item = item


@dataclass(frozen=True)
class _Item:
    text: str
    tokens: List[tokenize.TokenInfo]
    after_semicolon: bool


def _tokenize(text: str) -> List[tokenize.TokenInfo]:
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(text).readline))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise LiteralSyntaxError(f"Malformed FrankenTuple literal ({exc})") from exc
    return [tok for tok in tokens if tok.type not in _SKIPPED_TOKENS]


def _line_offsets(text: str) -> List[int]:
    offsets = [0]
    for line in text.splitlines(keepends=True):
        offsets.append(offsets[-1] + len(line))
    return offsets


def _matching_close(tokens: List[tokenize.TokenInfo], start: int) -> int:
    """Find the index of the token closing the bracket at ``start``."""
    stack = []
    for i in range(start, len(tokens)):
        string = tokens[i].string
        if tokens[i].type != tokenize.OP:
            continue
        if string in _OPENERS:
            stack.append(_OPENERS[string])
        elif string in _CLOSERS:
            if not stack or stack.pop() != string:
                raise LiteralSyntaxError("Unbalanced brackets in FrankenTuple literal")
            if not stack:
                return i
    raise LiteralSyntaxError("Unbalanced brackets in FrankenTuple literal")


def _split_items(text: str, tokens: List[tokenize.TokenInfo], source: str) -> List[_Item]:
    offsets = _line_offsets(text)

    def offset(position):
        row, col = position
        return offsets[row - 1] + col

    sections: List[List[List[tokenize.TokenInfo]]] = [[[]]]
    depth = 0
    for tok in tokens:
        if tok.type == tokenize.OP and depth == 0 and tok.string in (",", ";"):
            if tok.string == ";":
                if len(sections) == 2:
                    raise LiteralSyntaxError("FrankenTuple literal may contain at most one ';'")
                sections.append([[]])
            else:
                sections[-1].append([])
            continue
        if tok.type == tokenize.OP and tok.string in _OPENERS:
            depth += 1
        elif tok.type == tokenize.OP and tok.string in _CLOSERS:
            depth -= 1
        sections[-1][-1].append(tok)

    items = []
    for section_index, section in enumerate(sections):
        # A trailing comma, or an empty section, leaves one empty item at the end
        if not section[-1]:
            section = section[:-1]
        for item_tokens in section:
            if not item_tokens:
                raise LiteralSyntaxError("Empty item in FrankenTuple literal", source)
            item_text = text[offset(item_tokens[0].start):offset(item_tokens[-1].end)]
            items.append(_Item(item_text, item_tokens, after_semicolon=section_index == 1))
    return items


def _is_identifier(tok: tokenize.TokenInfo) -> bool:
    return tok.type == tokenize.NAME and not keyword.iskeyword(tok.string)


def _lookup(name: str, namespace: Optional[Mapping[str, Any]], settings: Settings, item: str) -> Any:
    if namespace is None or not settings.resolve_names:
        raise LiteralSyntaxError(f"Cannot resolve name {name!r} without a namespace", item)
    try:
        return namespace[name]
    except KeyError:
        raise LiteralSyntaxError(f"Unknown name {name!r} in FrankenTuple literal", item) from None


def _evaluate(value_text: str, value_tokens: List[tokenize.TokenInfo], namespace, settings: Settings, item: str) -> Any:
    if len(value_tokens) == 1 and _is_identifier(value_tokens[0]) and value_tokens[0].string not in _LITERAL_NAMES:
        return _lookup(value_tokens[0].string, namespace, settings, item)
    try:
        return ast.literal_eval(value_text)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError) as exc:
        raise LiteralSyntaxError("FrankenTuple literal values must be Python literals", item) from exc


def parse_ftuple(
    source: str,
    namespace: Optional[Mapping[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> FrankenTuple:
    """
    Construct a FrankenTuple from literal text.

    The text may intermix positional and named items in any order, or separate
    them with a semicolon as in a function signature. After the semicolon a bare
    identifier ``x`` is shorthand for ``x=x``. Surrounding parentheses are
    optional and trailing commas are allowed.

    Args:
        source: Literal text such as ``"(1, a=3, 2, b=4)"``
        namespace: Mapping used to resolve bare identifiers
        settings: Parser settings (defaults to ``Settings()``)

    Returns:
        The parsed FrankenTuple

    Raises:
        LiteralSyntaxError: If the text is not a valid FrankenTuple literal

    Examples:
        >>> parse_ftuple("(1, 2; a=3, b=4)")
        FrankenTuple((1, 2), {'a': 3, 'b': 4})
        >>> parse_ftuple("(1, a=3, 2, b=4)")
        FrankenTuple((1, 2), {'a': 3, 'b': 4})
    """
    settings = settings or Settings()
    if len(source) > settings.max_literal_length:
        raise LiteralSyntaxError(
            f"FrankenTuple literal exceeds {settings.max_literal_length} characters"
        )

    # Wrapping keeps multi-line literals inside one bracketed expression
    text = "(" + source.strip() + "\n)"
    tokens = _tokenize(text)
    if not tokens or _matching_close(tokens, 0) != len(tokens) - 1:
        raise LiteralSyntaxError("Unbalanced brackets in FrankenTuple literal", source)
    tokens = tokens[1:-1]

    # Drop the literal's own enclosing parentheses, if any
    if tokens and tokens[0].string == "(" and _matching_close(tokens, 0) == len(tokens) - 1:
        tokens = tokens[1:-1]

    positional = []
    named = {}
    for item in _split_items(text, tokens, source.strip()):
        toks = item.tokens
        if len(toks) >= 2 and toks[1].type == tokenize.OP and toks[1].string == "=":
            if not _is_identifier(toks[0]):
                raise LiteralSyntaxError("Invalid name in FrankenTuple literal", item.text)
            name = toks[0].string
            value_tokens = toks[2:]
            if not value_tokens:
                raise LiteralSyntaxError("Missing value in FrankenTuple literal", item.text)
            value_text = item.text[item.text.index("=") + 1:].strip()
            value = _evaluate(value_text, value_tokens, namespace, settings, item.text)
        elif item.after_semicolon:
            if len(toks) != 1 or not _is_identifier(toks[0]):
                raise LiteralSyntaxError("Only named items may follow ';'", item.text)
            name = toks[0].string
            value = _lookup(name, namespace, settings, item.text)
        else:
            positional.append(_evaluate(item.text, toks, namespace, settings, item.text))
            continue

        if name in named:
            raise LiteralSyntaxError(f"Duplicate name {name!r} in FrankenTuple literal", item.text)
        named[name] = value

    logger.debug(f"Parsed literal into {len(positional)} positional and {len(named)} named items")
    return FrankenTuple(positional, named)
