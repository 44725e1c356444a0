"""
Expression evaluation for brace groups.

An expression is the text between one matched pair of braces, after every
nested group inside it has already been replaced by its value. It is either a
plain lookup (``title``) or a conditional (``artist?by someone:anonymous``).
"""

from typing import Callable, NamedTuple, Optional, Union

Lookup = Callable[[str], Optional[str]]


class TemplateError(Exception):
    """Base error for template rendering."""

    pass


class RenderOverflowError(TemplateError, OverflowError):
    """Rendered text would exceed a fixed capacity."""

    def __init__(self, message: str, limit: int, position: int):
        super().__init__(message)
        self.limit = limit
        self.position = position


class LookupExpression(NamedTuple):
    name: str


class ConditionalExpression(NamedTuple):
    condition: str
    then_text: str
    else_text: str


Expression = Union[LookupExpression, ConditionalExpression]


def parse_expression(expr: str) -> Expression:
    """
    Classify raw expression text.

    Only the first ``?`` and the first ``:`` after it are significant; any
    later ``?`` or ``:`` belongs to the else text. A ``?`` without a following
    ``:`` makes the whole text a lookup name.
    """
    qpos = -1
    cpos = -1
    for i, ch in enumerate(expr):
        if qpos < 0:
            if ch == "?":
                qpos = i
        elif ch == ":":
            cpos = i
            break

    if qpos >= 0 and cpos >= 0:
        return ConditionalExpression(expr[:qpos], expr[qpos + 1 : cpos], expr[cpos + 1 :])
    return LookupExpression(expr)


def evaluate(expr: str, lookup: Lookup, max_expression_length: Optional[int] = None) -> str:
    """
    Resolve expression text against a fact lookup.

    Args:
        expr: Raw expression text with nested groups already resolved
        lookup: Callable returning a fact value, or None when the name is unknown
        max_expression_length: Optional capacity for the expression text itself

    Returns:
        The fact value for a lookup (empty string when unknown), or the
        selected branch text, verbatim, for a conditional

    Raises:
        RenderOverflowError: If expr is longer than max_expression_length
    """
    if max_expression_length is not None and len(expr) > max_expression_length:
        raise RenderOverflowError(
            f"Expression of {len(expr)} characters exceeds capacity of {max_expression_length}",
            limit=max_expression_length,
            position=len(expr),
        )

    parsed = parse_expression(expr)
    if isinstance(parsed, ConditionalExpression):
        if lookup(parsed.condition):
            return parsed.then_text
        return parsed.else_text

    value = lookup(parsed.name)
    return value if value is not None else ""
