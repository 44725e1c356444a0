"""
MPD playback state and change tracking.
"""

import logging
from enum import Enum
from typing import Optional

log = logging.getLogger("playback_state")


class PlaybackState(Enum):
    """Player states as reported by MPD's ``status`` command."""

    UNKNOWN = "unknown"
    STOPPED = "stop"
    PLAYING = "play"
    PAUSED = "pause"

    @property
    def label(self) -> str:
        """Human readable label exposed to templates as ``{state}``."""
        return _STATE_LABELS[self]

    def __str__(self) -> str:
        return self.label


_STATE_LABELS = {
    PlaybackState.UNKNOWN: "unknown",
    PlaybackState.STOPPED: "stopped",
    PlaybackState.PLAYING: "now playing",
    PlaybackState.PAUSED: "paused",
}


class PlaybackStateTracker:
    """
    Remembers the last reported state so player events can be classified.

    MPD emits a ``player`` idle event for seeks and song changes as well as
    for play/pause/stop, so a change of state is not implied by an event.
    """

    def __init__(self, initial_state: PlaybackState = PlaybackState.UNKNOWN):
        self._current_state = initial_state
        self._previous_state: Optional[PlaybackState] = None

    @property
    def current_state(self) -> PlaybackState:
        return self._current_state

    @property
    def previous_state(self) -> Optional[PlaybackState]:
        return self._previous_state

    def update(self, new_state: PlaybackState, reason: str = "") -> bool:
        """
        Record the latest state.

        Returns:
            True if the state changed, False if it is unchanged
        """
        if new_state == self._current_state:
            log.debug("State unchanged: %s", new_state)
            return False

        self._previous_state = self._current_state
        self._current_state = new_state
        log.info(
            "State transition: %s -> %s%s", self._previous_state, self._current_state, f" ({reason})" if reason else ""
        )
        return True

    def reset(self, new_state: PlaybackState = PlaybackState.UNKNOWN) -> None:
        """Reset tracker, e.g. after the connection is lost."""
        self._previous_state = self._current_state
        self._current_state = new_state
        log.info("State tracker reset to: %s", new_state)


def parse_playback_state(state_str: Optional[str]) -> PlaybackState:
    """
    Parse MPD's ``state`` field.

    Args:
        state_str: ``play``, ``pause`` or ``stop``

    Returns:
        Matching PlaybackState, UNKNOWN for anything else
    """
    if state_str is None:
        return PlaybackState.UNKNOWN
    try:
        return PlaybackState(state_str)
    except ValueError:
        log.warning("Unknown playback state: %s", state_str)
        return PlaybackState.UNKNOWN
