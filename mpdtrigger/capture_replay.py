"""
Capture and replay of player-event fact snapshots for debugging templates.
"""

import gzip
import json
import time
from pathlib import Path
from typing import Callable, Dict, Optional, TextIO

from .module_registry import module_registry

log = module_registry.register_module(
    name="capture",
    description="Fact snapshot capture and replay",
    logger_name="capture",
    debug_flag="--debug-capture",
    category="debug",
)

FactsCallback = Callable[[Dict[str, Optional[str]]], None]
EventCallback = Callable[[str, str, float], None]


class EventCapture:
    """Writes each event's fact snapshot to a JSON Lines file with timestamps."""

    def __init__(self, capture_file: str):
        self._capture_file = Path(capture_file)
        self._file_handle: Optional[TextIO] = None
        self._start_time = time.time()
        self._last_activity_time = self._start_time

        self._capture_file.parent.mkdir(parents=True, exist_ok=True)
        log.info("Event capture initialized: %s", self._capture_file)

    @property
    def active(self) -> bool:
        return self._file_handle is not None

    def start_capture(self) -> None:
        """Open the capture file and write its header."""
        self._file_handle = open(self._capture_file, "w", encoding="utf-8")
        self._start_time = time.time()
        self._last_activity_time = self._start_time
        self._write_entry(
            {
                "type": "capture_header",
                "version": "1.0",
                "start_time": self._start_time,
                "description": "mpd-trigger fact capture",
            }
        )
        log.info("Started event capture to: %s", self._capture_file)

    def capture_facts(self, facts: Dict[str, Optional[str]]) -> None:
        """Record the facts a render is about to see."""
        if not self._file_handle:
            return

        now = time.time()
        entry = {
            "type": "facts",
            "timestamp": now - self._start_time,
            "gap_since_last": now - self._last_activity_time,
            "facts": facts,
        }
        self._last_activity_time = now
        self._write_entry(entry)

    def capture_event(self, event_type: str, description: str) -> None:
        """Record a notable event (connection, state change, render error)."""
        if not self._file_handle:
            return

        entry = {
            "type": "event",
            "timestamp": time.time() - self._start_time,
            "event_type": event_type,
            "description": description,
        }
        self._write_entry(entry)
        log.debug("Captured event: %s - %s", event_type, description)

    def stop_capture(self) -> None:
        """Write the footer and close the file."""
        if not self._file_handle:
            return

        end_time = time.time()
        footer = {"type": "capture_footer", "end_time": end_time, "total_duration": end_time - self._start_time}
        self._write_entry(footer)
        self._file_handle.close()
        self._file_handle = None
        log.info("Stopped event capture. Duration: %.2f seconds", end_time - self._start_time)

    def _write_entry(self, entry: dict) -> None:
        if self._file_handle:
            json.dump(entry, self._file_handle)
            self._file_handle.write("\n")
            self._file_handle.flush()


class EventReplay:
    """Replays captured fact snapshots with their original timing."""

    def __init__(self, capture_file: str, fast_forward_gaps: bool = True, max_gap_seconds: float = 2.0):
        """
        Args:
            capture_file: Path to a capture file (``.gz`` supported)
            fast_forward_gaps: Whether to skip through idle periods
            max_gap_seconds: Largest gap replayed in real time
        """
        self._capture_file = Path(capture_file)
        self._fast_forward_gaps = fast_forward_gaps
        self._max_gap_seconds = max_gap_seconds

        if not self._capture_file.exists():
            raise FileNotFoundError(f"Capture file not found: {capture_file}")

        log.info("Event replay initialized: %s", self._capture_file)

    def _is_gzipped(self) -> bool:
        if self._capture_file.suffix.lower() == ".gz":
            return True
        with open(self._capture_file, "rb") as f:
            return f.read(2) == b"\x1f\x8b"

    def _open_file(self):
        if self._is_gzipped():
            return gzip.open(self._capture_file, "rt", encoding="utf-8")
        return open(self._capture_file, "r", encoding="utf-8")

    def replay(self, facts_callback: FactsCallback, event_callback: Optional[EventCallback] = None) -> int:
        """
        Feed every captured snapshot to facts_callback.

        Returns:
            Number of snapshots replayed
        """
        last_timestamp = 0.0
        replayed = 0

        log.info("Starting event replay...")
        with self._open_file() as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    entry = json.loads(line)
                except json.JSONDecodeError as e:
                    log.warning("Skipping invalid JSON line: %s", e)
                    continue

                entry_type = entry.get("type")
                timestamp = entry.get("timestamp", 0.0)

                if entry_type == "capture_footer":
                    break

                if entry_type == "facts":
                    time_to_wait = timestamp - last_timestamp
                    if self._fast_forward_gaps and entry.get("gap_since_last", 0.0) > self._max_gap_seconds:
                        time_to_wait = min(time_to_wait, 0.1)
                        log.debug("Fast-forwarding gap at %.2fs", timestamp)
                    if time_to_wait > 0:
                        time.sleep(time_to_wait)

                    facts_callback(entry.get("facts", {}))
                    replayed += 1

                elif entry_type == "event" and event_callback:
                    event_callback(entry.get("event_type", ""), entry.get("description", ""), timestamp)

                if entry_type in ("facts", "event"):
                    last_timestamp = timestamp

        log.info("Replay completed: %d snapshots", replayed)
        return replayed


def create_capture_filename(prefix: str = "mpd_trigger_capture") -> str:
    """Create a timestamped filename for captures."""
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    return f"/tmp/{prefix}_{timestamp}.jsonl"
