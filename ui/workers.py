"""
NMEA ingestion worker.

  - IngestionThread: owns the serial connection for one session, frames and
    decodes NMEA sentences and publishes them to the SharedState store
  - StreamSignals: Qt signals for status and log messages to the UI thread
  - start_session: claims the store and starts the thread

The thread is the only writer to SharedState; the viewer polls get_state().
"""

import logging
import threading
from typing import Callable, Optional

import serial
from PySide6.QtCore import QObject, Signal

from core.data_store import SharedState
from core.global_config import get_global_config
from core.gsv_decoder import decode_gsv
from core.sentence_buffer import SentenceBuffer
from core.serial_client import SerialClient

logger = logging.getLogger(__name__)

STOP_REASON_USER = "stopped"


class StreamSignals(QObject):
    """
    Qt signal container for inter-thread communication.

    Attributes:
        log_signal (Signal[str]): Status updates and errors.
        status_signal (Signal[str, bool]): (port, streaming) on connection state change.
    """
    log_signal = Signal(str)
    status_signal = Signal(str, bool)


class IngestionThread(threading.Thread):
    """
    Background reader for one serial session.

    Cycle: read up to `read_size` bytes -> frame lines -> append each line to
    the log -> decode GSV lines -> replace the satellite snapshot with this
    cycle's records -> pause `cycle_pause` seconds.

    Notes:
    - The snapshot is replaced after every read that returned data, even when
      it held no GSV sentence, so such a chunk clears the satellite list.
    - A read that times out with no data publishes nothing.
    - Open failure and read errors are terminal: no retry, no reconnect.
    - stop() is honoured at the top of every cycle and during the pause.
    """

    def __init__(
        self,
        port: str,
        state: SharedState,
        signals: Optional[StreamSignals] = None,
        client_factory: Callable[[str], SerialClient] = SerialClient.from_config,
    ):
        """
        Args:
            port: Serial port name
            state: Store to publish into; must already be claimed with start_if_idle
            signals: Optional Qt signal emitter
            client_factory: Builds the (unopened) connection for `port`
        """
        super().__init__(name=f"nmea-{port}")
        self.port = port
        self.state = state
        self.signals = signals
        self.client_factory = client_factory
        self.daemon = True
        self.client = None
        self.sentences = SentenceBuffer()
        self.stop_reason = None
        self._stop_event = threading.Event()

        config = get_global_config()
        self.read_size = config.serial_settings.read_size
        self.cycle_pause = config.cycle_pause

    def _emit_log(self, message: str):
        if self.signals is not None:
            self.signals.log_signal.emit(f"[{self.port}] {message}")

    def _emit_status(self, streaming: bool):
        if self.signals is not None:
            self.signals.status_signal.emit(self.port, streaming)

    def run(self):
        """
        Procedure:
          1. Open the port. On failure record STOPPED and return.
          2. Loop until stop() or a read error, publishing each cycle.
          3. Close the port and release the session.
        """
        try:
            self.client = self.client_factory(self.port)
            self.client.connect()
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error("Cannot open %s: %s", self.port, e)
            self._emit_log(f"Open failed: {e}")
            self.client = None
            self._finish(f"open failed: {e}")
            return

        self.state.mark_streaming()
        logger.info("Streaming NMEA from %s", self.port)
        self._emit_log("Connected")
        self._emit_status(True)

        reason = STOP_REASON_USER
        try:
            while not self._stop_event.is_set():
                try:
                    data = self.client.read(self.read_size)
                except (serial.SerialException, OSError) as e:
                    logger.warning("Read error on %s: %s", self.port, e)
                    self._emit_log(f"Read error: {e}")
                    reason = f"read error: {e}"
                    break

                self.process_chunk(data)
                self._stop_event.wait(self.cycle_pause)
        except Exception as e:
            logger.exception("Ingestion on %s crashed", self.port)
            self._emit_log(f"Crashed: {e}")
            reason = f"crashed: {e}"
            raise
        finally:
            self.client.close()
            self._emit_log("Connection closed")
            self._emit_status(False)
            self._finish(reason)

    def process_chunk(self, data: bytes) -> int:
        """
        Publish one read's worth of data.

        Args:
            data: Raw bytes from one read

        Returns:
            int: Number of complete lines processed
        """
        satellites = []
        count = 0
        for line in self.sentences.feed(data):
            self.state.append_log_line(line)
            satellites.extend(decode_gsv(line))
            count += 1

        if data:
            self.state.replace_satellites(satellites)
        return count

    def _finish(self, reason: str):
        self.stop_reason = reason
        self.state.finish(reason)
        logger.info("Session on %s ended: %s", self.port, reason)

    def stop(self):
        """
        Signal the thread to stop.

        The thread exits after the current read returns (within the read timeout).
        """
        self._stop_event.set()


def start_session(
    state: SharedState,
    port: str,
    signals: Optional[StreamSignals] = None,
    client_factory: Callable[[str], SerialClient] = SerialClient.from_config,
) -> Optional[IngestionThread]:
    """
    Start ingesting from `port` unless a session is already running on `state`.

    Returns:
        The started IngestionThread, or None if the store is busy.
    """
    if not state.start_if_idle(port):
        logger.info("Ingestion already active, ignoring start on %s", port)
        return None

    thread = IngestionThread(port, state, signals=signals, client_factory=client_factory)
    thread.start()
    return thread
