"""Watches an MPD server for player events and hands them to a callback."""

import contextlib
import socket
import threading
import time
from typing import Any, Callable, Mapping, Optional

from mpd import MPDClient, MPDError

from .capture_replay import EventCapture
from .config import MPDConfig
from .module_registry import module_registry
from .playback_state import PlaybackState, PlaybackStateTracker, parse_playback_state

log = module_registry.register_module(
    name="mpd",
    description="MPD connection, idle loop and reconnects",
    logger_name="mpd",
    debug_flag="--debug-mpd",
    category="input",
)

PlayerEventCallback = Callable[[Mapping[str, Any], Mapping[str, Any]], None]


class MPDMonitor:
    """Runs the connect / idle / reconnect loop on a background thread."""

    def __init__(
        self,
        event_callback: PlayerEventCallback,
        config: Optional[MPDConfig] = None,
        state_callback: Optional[Callable[[PlaybackState], None]] = None,
        capture: Optional[EventCapture] = None,
        client_factory: Callable[[], MPDClient] = MPDClient,
    ):
        """Initialize monitor with the player event callback."""
        self._config = config or MPDConfig()
        self._event_callback = event_callback
        self._state_callback = state_callback
        self._capture = capture
        self._client_factory = client_factory

        self._client: Optional[MPDClient] = None
        self._state_tracker = PlaybackStateTracker()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.error: Optional[BaseException] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def get_state(self) -> PlaybackState:
        """Get the last reported playback state."""
        return self._state_tracker.current_state

    def start(self) -> None:
        """Start the monitoring thread."""
        if self._thread and self._thread.is_alive():
            log.warning("MPDMonitor is already running.")
            return

        if self._capture:
            self._capture.start_capture()

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=self._config.daemon_threads)
        self._thread.start()

    def stop(self) -> None:
        """Stop monitoring and close the connection."""
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            # Shutting the socket down fails a pending idle read; the worker disconnects.
            # Repeated in case the worker was still connecting on the first attempt.
            deadline = time.monotonic() + self._config.thread_join_timeout
            while self._thread.is_alive() and time.monotonic() < deadline:
                self._shutdown_socket()
                self._thread.join(timeout=0.05)
        else:
            self._disconnect()

        if self._thread:
            if self._thread.is_alive():
                log.warning("MPD thread did not exit gracefully within timeout")
            self._thread = None

        if self._capture:
            self._capture.capture_event("monitor_stop", "Stopping MPD monitor")
            self._capture.stop_capture()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the monitor is stopped; returns True if it was."""
        return self._stop_event.wait(timeout)

    def connect(self) -> None:
        """Open a connection to the configured server."""
        log.info("trying to connect %s:%d", self._config.host, self._config.port)
        client = self._client_factory()
        client.timeout = self._config.connect_timeout
        client.idletimeout = None
        client.connect(self._config.host, self._config.port)
        if self._config.password:
            client.password(self._config.password)
        self._client = client
        log.info("Connected to MPD %s", getattr(client, "mpd_version", "?"))
        if self._capture:
            self._capture.capture_event("connected", f"{self._config.host}:{self._config.port}")

    def process_next_event(self) -> bool:
        """
        Wait for the next idle notification and dispatch it.

        Returns:
            True if a player event was delivered to the callback
        """
        if self._client is None:
            raise MPDError("not connected")

        changed = self._client.idle("player")
        log.info("new event: %s", ", ".join(changed) if changed else "none")
        if "player" not in changed:
            return False

        status = self._client.status()
        song = self._client.currentsong()

        new_state = parse_playback_state(status.get("state"))
        if self._state_tracker.update(new_state, "player event") and self._state_callback:
            self._state_callback(new_state)

        if not song:
            log.debug("No current song, nothing to trigger")
            return False

        self._event_callback(status, song)
        return True

    def _run_loop(self) -> None:
        log.info("MPD thread started")
        while not self._stop_event.is_set():
            try:
                self.connect()
                while not self._stop_event.is_set():
                    self.process_next_event()
            except (MPDError, OSError) as e:
                if self._stop_event.is_set():
                    break
                log.error("%s", e)
                if self._capture:
                    self._capture.capture_event("connection_error", str(e))
            except Exception as e:
                log.exception("Unexpected error handling player event, stopping: %s", e)
                self.error = e
                self._stop_event.set()
                break
            finally:
                self._disconnect()

            self._state_tracker.reset()
            if self._stop_event.wait(self._config.reconnect_delay_seconds):
                break
            log.info("reconnecting")
        log.info("MPD thread exited")

    def _shutdown_socket(self) -> None:
        client = self._client
        sock = getattr(client, "_sock", None) if client is not None else None
        if sock is not None:
            with contextlib.suppress(OSError):
                sock.shutdown(socket.SHUT_RDWR)

    def _disconnect(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            with contextlib.suppress(MPDError, OSError):
                client.disconnect()
