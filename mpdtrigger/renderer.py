"""
Command template renderer.

Scans a template once, left to right. Every ``{`` is written to the output as
a placeholder and its position pushed on a stack; every matching ``}`` pops
the position, evaluates the text written since, and replaces it in place.
Inner groups therefore resolve before the group that encloses them.
"""

from typing import List, Mapping, Optional, Union

from .expression import RenderOverflowError, TemplateError, evaluate
from .fact_dictionary import FactDictionary, FactSnapshot
from .module_registry import module_registry

log = module_registry.register_module(
    name="render",
    description="Template rendering (lookups, conditionals, overflow)",
    logger_name="render",
    debug_flag="--debug-render",
    category="core",
)

# A 2048 byte command buffer, less its terminator
DEFAULT_MAX_OUTPUT_LENGTH = 2047
# A 256 byte token buffer, less its terminator
DEFAULT_MAX_EXPRESSION_LENGTH = 255

Facts = Union[FactSnapshot, FactDictionary, Mapping[str, Optional[str]]]

__all__ = [
    "DEFAULT_MAX_EXPRESSION_LENGTH",
    "DEFAULT_MAX_OUTPUT_LENGTH",
    "RenderOverflowError",
    "TemplateError",
    "TemplateRenderer",
    "render",
]


def _as_snapshot(facts: Facts) -> FactSnapshot:
    if isinstance(facts, FactSnapshot):
        return facts
    if isinstance(facts, FactDictionary):
        return facts.snapshot()
    return FactSnapshot(facts)


class TemplateRenderer:
    """Renders command templates against a snapshot of playback facts."""

    def __init__(
        self,
        max_output_length: Optional[int] = DEFAULT_MAX_OUTPUT_LENGTH,
        max_expression_length: Optional[int] = None,
    ):
        """
        Args:
            max_output_length: Capacity of the output; None for unbounded
            max_expression_length: Capacity of a single group's expression text; None to skip the check
        """
        self.max_output_length = max_output_length
        self.max_expression_length = max_expression_length

    def render(self, template: str, facts: Facts) -> str:
        """
        Render template against facts.

        A dictionary is snapshotted first, so slot updates made while
        rendering are not observed.

        Raises:
            RenderOverflowError: If the output grows past max_output_length at any point
        """
        snapshot = _as_snapshot(facts)
        out: List[str] = []
        marks: List[int] = []
        escaped = False

        for pos, ch in enumerate(template):
            if escaped:
                out.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
                continue
            elif ch == "{":
                marks.append(len(out))
                out.append(ch)
            elif ch == "}" and marks:
                start = marks.pop()
                expr = "".join(out[start + 1 :])
                value = evaluate(expr, snapshot.lookup, self.max_expression_length)
                log.debug("Resolved {%s} -> %r", expr, value)
                del out[start:]
                out.extend(value)
            else:
                out.append(ch)

            self._check_capacity(len(out), pos)

        if escaped:
            log.debug("Trailing escape at end of template ignored")
        if marks:
            log.debug("%d unmatched '{' left literal", len(marks))

        return "".join(out)

    def _check_capacity(self, length: int, pos: int) -> None:
        if self.max_output_length is not None and length > self.max_output_length:
            raise RenderOverflowError(
                f"Rendered output exceeds capacity of {self.max_output_length} characters "
                f"at template position {pos}",
                limit=self.max_output_length,
                position=pos,
            )


def render(
    template: str,
    facts: Facts,
    max_output_length: Optional[int] = DEFAULT_MAX_OUTPUT_LENGTH,
    max_expression_length: Optional[int] = None,
) -> str:
    """Render template against facts with a one-off renderer."""
    renderer = TemplateRenderer(max_output_length=max_output_length, max_expression_length=max_expression_length)
    return renderer.render(template, facts)
