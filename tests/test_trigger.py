"""Tests for the per-event render and execute glue."""

from unittest.mock import Mock

from mpdtrigger.executor import ExecutionResult
from mpdtrigger.renderer import TemplateRenderer
from mpdtrigger.trigger import CommandTrigger

TEMPLATE = "{title} by {artist?{artist}:Unknown} ({state}, {elapsed_pct}%)"


class TestCommandTrigger:
    """Test the CommandTrigger class."""

    def setup_method(self):
        self.executor = Mock()
        self.executor.execute.side_effect = lambda command: ExecutionResult(command=command, returncode=0)
        self.trigger = CommandTrigger(TEMPLATE, executor=self.executor)

    def test_player_event_renders_and_executes(self):
        """Test that a player event runs the rendered command."""
        status = {"state": "play", "elapsed": "30", "duration": "120"}
        song = {"title": "Song A", "artist": "Band"}

        result = self.trigger.handle_player_event(status, song)

        self.executor.execute.assert_called_once_with("Song A by Band (now playing, 25%)")
        assert result.success
        assert self.trigger.events_handled == 1

    def test_missing_artist_uses_else_branch(self):
        self.trigger.handle_player_event({"state": "pause"}, {"title": "Song A"})
        self.executor.execute.assert_called_once_with("Song A by Unknown (paused, 0%)")

    def test_facts_are_refreshed_per_event(self):
        """Test that tags from a previous song do not leak into the next render."""
        self.trigger.handle_player_event({"state": "play"}, {"title": "One", "artist": "Band"})
        self.trigger.handle_player_event({"state": "play"}, {"title": "Two"})
        assert self.executor.execute.call_args_list[-1][0][0] == "Two by Unknown (now playing, 0%)"

    def test_overflow_skips_event(self):
        """Test that a render overflow is logged and the event skipped."""
        trigger = CommandTrigger("{title}", renderer=TemplateRenderer(max_output_length=5), executor=self.executor)

        result = trigger.handle_player_event({"state": "play"}, {"title": "Much too long"})

        assert result is None
        self.executor.execute.assert_not_called()
        assert trigger.render_failures == 1

    def test_recovers_after_overflow(self):
        trigger = CommandTrigger("{title}", renderer=TemplateRenderer(max_output_length=5), executor=self.executor)
        trigger.handle_player_event({"state": "play"}, {"title": "Much too long"})
        trigger.handle_player_event({"state": "play"}, {"title": "Short"})
        self.executor.execute.assert_called_once_with("Short")

    def test_apply_facts_ignores_unknown_names(self):
        self.trigger.apply_facts({"title": "Song A", "state": "stopped", "genre": "Rock"})
        self.executor.execute.assert_called_once_with("Song A by Unknown (stopped, %)")

    def test_capture_records_snapshot(self):
        capture = Mock()
        trigger = CommandTrigger("{title}", executor=self.executor, capture=capture)

        trigger.apply_facts({"title": "Song A"})

        captured = capture.capture_facts.call_args[0][0]
        assert captured["title"] == "Song A"
        assert "elapsed_pct" in captured
