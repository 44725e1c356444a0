"""
Tests for MPD playback state parsing and tracking.
"""

import pytest

from mpdtrigger.playback_state import PlaybackState, PlaybackStateTracker, parse_playback_state


class TestPlaybackState:
    """Test the PlaybackState enum."""

    def test_state_labels(self):
        """Test that states render with the labels templates see."""
        assert str(PlaybackState.UNKNOWN) == "unknown"
        assert str(PlaybackState.STOPPED) == "stopped"
        assert str(PlaybackState.PLAYING) == "now playing"
        assert str(PlaybackState.PAUSED) == "paused"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("play", PlaybackState.PLAYING),
            ("pause", PlaybackState.PAUSED),
            ("stop", PlaybackState.STOPPED),
            ("bogus", PlaybackState.UNKNOWN),
            (None, PlaybackState.UNKNOWN),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_playback_state(raw) == expected


class TestPlaybackStateTracker:
    """Test the PlaybackStateTracker class."""

    def setup_method(self):
        self.tracker = PlaybackStateTracker()

    def test_initial_state(self):
        """Test that the tracker starts UNKNOWN with no history."""
        assert self.tracker.current_state == PlaybackState.UNKNOWN
        assert self.tracker.previous_state is None

    def test_update_reports_change(self):
        """Test that a new state is reported as a change."""
        assert self.tracker.update(PlaybackState.PLAYING, "player event")
        assert self.tracker.current_state == PlaybackState.PLAYING
        assert self.tracker.previous_state == PlaybackState.UNKNOWN

    def test_same_state_is_not_a_change(self):
        """Test that seeking within a song keeps the state unchanged."""
        self.tracker.update(PlaybackState.PLAYING)
        assert not self.tracker.update(PlaybackState.PLAYING)
        assert self.tracker.previous_state == PlaybackState.UNKNOWN

    def test_any_transition_allowed(self):
        """Test that MPD may jump between any two states."""
        for state in (PlaybackState.PAUSED, PlaybackState.STOPPED, PlaybackState.PLAYING, PlaybackState.PAUSED):
            assert self.tracker.update(state)

    def test_reset(self):
        """Test resetting the tracker after a disconnect."""
        self.tracker.update(PlaybackState.PLAYING)
        self.tracker.reset()
        assert self.tracker.current_state == PlaybackState.UNKNOWN
        assert self.tracker.previous_state == PlaybackState.PLAYING
