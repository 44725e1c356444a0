"""
Glue between player events, the fact dictionary, the renderer and the shell.
"""

from typing import Any, Mapping, Optional

from .capture_replay import EventCapture
from .executor import CommandExecutor, ExecutionResult
from .expression import RenderOverflowError
from .fact_dictionary import FactDictionary, create_playback_dictionary
from .module_registry import module_registry
from .playback_facts import build_facts
from .renderer import TemplateRenderer

log = module_registry.register_module(
    name="trigger",
    description="Per-event fact refresh, render and execute",
    logger_name="trigger",
    debug_flag="--debug-trigger",
    category="core",
)
log_render = module_registry.get_logger("render")


class CommandTrigger:
    """Renders the command template once per player event and runs the result."""

    def __init__(
        self,
        template: str,
        facts: Optional[FactDictionary] = None,
        renderer: Optional[TemplateRenderer] = None,
        executor: Optional[CommandExecutor] = None,
        capture: Optional[EventCapture] = None,
    ):
        self.template = template
        self.facts = facts if facts is not None else create_playback_dictionary()
        self.renderer = renderer or TemplateRenderer()
        self.executor = executor or CommandExecutor()
        self._capture = capture
        self.events_handled = 0
        self.render_failures = 0

    def handle_player_event(
        self, status: Mapping[str, Any], song: Optional[Mapping[str, Any]]
    ) -> Optional[ExecutionResult]:
        """Refresh facts from an MPD status/currentsong pair and fire."""
        self.facts.update(build_facts(status, song).to_dict())
        return self.fire()

    def apply_facts(self, values: Mapping[str, Optional[str]]) -> Optional[ExecutionResult]:
        """Refresh facts from a plain mapping (replay, tests) and fire."""
        self.facts.update({name: value for name, value in values.items() if name in self.facts})
        return self.fire()

    def fire(self) -> Optional[ExecutionResult]:
        """
        Render the template against the current facts and execute it.

        Returns:
            The execution result, or None when rendering failed and the event was skipped
        """
        self.events_handled += 1
        snapshot = self.facts.snapshot()
        if self._capture:
            self._capture.capture_facts(dict(snapshot))

        try:
            command = self.renderer.render(self.template, snapshot)
        except RenderOverflowError as e:
            self.render_failures += 1
            log_render.error("Skipping event, render failed: %s", e)
            if self._capture:
                self._capture.capture_event("render_error", str(e))
            return None

        log.debug("Rendered command: %s", command)
        return self.executor.execute(command)
