"""
Translate MPD ``status`` and ``currentsong`` replies into template facts.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .playback_state import PlaybackState, parse_playback_state

SONG_TAGS = ("title", "artist", "album", "track")


@dataclass(frozen=True)
class PlaybackFacts:
    """Current playback facts, all rendered as strings except absent tags."""

    state: str
    elapsed_time: str
    total_time: str
    elapsed_pct: str
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    track: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def _first_tag(song: Mapping[str, Any], tag: str) -> Optional[str]:
    """Return the first value of a tag; python-mpd2 returns lists for repeated tags."""
    value = song.get(tag)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return None if value is None else str(value)


def _seconds(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def parse_times(status: Mapping[str, Any]) -> Tuple[int, int]:
    """
    Extract whole elapsed and total seconds from a status reply.

    Prefers the ``elapsed``/``duration`` fields and falls back to the older
    ``time`` field (``elapsed:total``).
    """
    elapsed = status.get("elapsed")
    total = status.get("duration")
    if (elapsed is None or total is None) and "time" in status:
        parts = str(status["time"]).split(":", 1)
        if elapsed is None:
            elapsed = parts[0]
        if total is None and len(parts) == 2:
            total = parts[1]
    return _seconds(elapsed), _seconds(total)


def elapsed_percent(elapsed: int, total: int) -> int:
    """Integer percentage of the song played, 0 when the length is unknown."""
    return elapsed * 100 // total if total else 0


def build_facts(status: Mapping[str, Any], song: Optional[Mapping[str, Any]] = None) -> PlaybackFacts:
    """Build the fact set for one player event."""
    song = song or {}
    state: PlaybackState = parse_playback_state(status.get("state"))
    elapsed, total = parse_times(status)
    return PlaybackFacts(
        state=state.label,
        elapsed_time=str(elapsed),
        total_time=str(total),
        elapsed_pct=str(elapsed_percent(elapsed, total)),
        **{tag: _first_tag(song, tag) for tag in SONG_TAGS},
    )
