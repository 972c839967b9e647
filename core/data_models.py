"""
Data models for satellite visibility records and ingestion session state.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class SatelliteRecord:
    """
    One satellite-in-view entry decoded from a GSV sentence.
    """
    id: str               # PRN as written in the sentence, e.g. "01"
    elevation: float      # Degrees (0-90)
    azimuth: float        # Degrees (0-359)
    strength: int         # SNR dB-Hz, 0-255


class SessionStatus(Enum):
    IDLE = "idle"
    OPENING = "opening"
    STREAMING = "streaming"
    STOPPED = "stopped"


@dataclass(frozen=True)
class StateSnapshot:
    """
    Read-only copy of the shared ingestion state handed to consumers.
    """
    satellites: Tuple[SatelliteRecord, ...]
    log_tail: Tuple[str, ...]
    is_reading: bool
    status: SessionStatus = SessionStatus.IDLE
    port: Optional[str] = None
    stop_reason: Optional[str] = None
