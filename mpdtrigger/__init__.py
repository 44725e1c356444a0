"""Run a shell command templated from MPD playback facts on every player event."""

__version__ = "0.1.0"
