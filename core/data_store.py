"""
Shared store for the NMEA ingestion session.

The ingestion thread is the only writer; the viewer (and tests) read through
`get_state()`, which returns an immutable copy. All access goes through one
lock so readers never see a log above capacity or a half-replaced satellite
list.
"""
from collections import deque
from typing import Iterable, List, Optional
import threading

from core.data_models import SatelliteRecord, SessionStatus, StateSnapshot

DEFAULT_LOG_CAPACITY = 500


class RollingLog:
    """
    Bounded FIFO of received NMEA lines.

    Not thread-safe on its own; SharedState guards it.
    """
    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Log capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._lines: deque[str] = deque()

    def append(self, line: str):
        self._lines.append(line)

    def trim(self) -> int:
        """Evict oldest lines until the log fits its capacity. Returns the number evicted."""
        evicted = 0
        while len(self._lines) > self.capacity:
            self._lines.popleft()
            evicted += 1
        return evicted

    def lines(self) -> List[str]:
        return list(self._lines)

    def clear(self):
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


class SharedState:
    """
    Lock-guarded ingestion state: rolling log, latest satellite snapshot,
    reading flag and session status.

    Notes:
    - `start_if_idle` is the only way to claim a session, which keeps at most
      one ingestion thread alive per store.
    - A session is released by `finish`, called by the ingestion thread on exit.
    """
    def __init__(self, log_capacity: int = DEFAULT_LOG_CAPACITY):
        self._lock = threading.Lock()
        self._log = RollingLog(log_capacity)
        self._satellites: tuple = ()
        self._is_reading = False
        self._status = SessionStatus.IDLE
        self._port: Optional[str] = None
        self._stop_reason: Optional[str] = None

    @property
    def log_capacity(self) -> int:
        return self._log.capacity

    def append_log_line(self, line: str):
        """Append one line and trim in the same critical section."""
        with self._lock:
            self._log.append(line)
            self._log.trim()

    def trim_log(self) -> int:
        with self._lock:
            return self._log.trim()

    def replace_satellites(self, records: Iterable[SatelliteRecord]):
        """Swap in a new satellite snapshot (may be empty)."""
        snapshot = tuple(records)
        with self._lock:
            self._satellites = snapshot

    def set_is_reading(self, flag: bool):
        with self._lock:
            self._is_reading = flag

    def _session_active(self) -> bool:
        return self._is_reading or self._status in (SessionStatus.OPENING, SessionStatus.STREAMING)

    def start_if_idle(self, port: str) -> bool:
        """
        Claim the store for a new ingestion session on `port`.

        Returns:
            bool: True if the caller may start an ingestion thread. False if a
            session is already opening or streaming.
        """
        with self._lock:
            if self._session_active():
                return False
            self._status = SessionStatus.OPENING
            self._port = port
            self._stop_reason = None
            return True

    def mark_streaming(self):
        """Connection is open: set the reading flag and enter STREAMING."""
        with self._lock:
            self._is_reading = True
            self._status = SessionStatus.STREAMING

    def finish(self, reason: str):
        """Record the end of the session. Published log and satellites are kept."""
        with self._lock:
            self._is_reading = False
            self._status = SessionStatus.STOPPED
            self._stop_reason = reason

    def reset(self) -> bool:
        """
        Drop log, satellites and status, e.g. when a different port is selected.

        Returns:
            bool: False (and nothing is changed) while a session is active.
        """
        with self._lock:
            if self._session_active():
                return False
            self._log.clear()
            self._satellites = ()
            self._status = SessionStatus.IDLE
            self._port = None
            self._stop_reason = None
            return True

    def get_state(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                satellites=self._satellites,
                log_tail=tuple(self._log.lines()),
                is_reading=self._is_reading,
                status=self._status,
                port=self._port,
                stop_reason=self._stop_reason,
            )
