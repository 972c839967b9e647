# ui/main_window.py
from datetime import datetime

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                               QLabel, QPlainTextEdit, QSplitter, QComboBox,
                               QPushButton, QGroupBox)
from PySide6.QtCore import Qt, Slot, QTimer
from PySide6.QtGui import QFont

from core.data_models import SessionStatus
from core.data_store import SharedState
from core.global_config import get_global_config, update_serial_settings
from core.gsv_decoder import talker_id
from core.serial_client import SerialClient
from ui.widgets import SkyplotWidget, SatelliteTable
from ui.workers import StreamSignals, start_session


class ViewerWindow(QMainWindow):
    """
    Main GUI: port selection, satellite list, live NMEA stream and sky map.

    - Owns the SharedState store and at most one ingestion thread.
    - Never touches the serial port itself; polls get_state() on a QTimer.
    """
    BAUD_RATES = [4800, 9600, 19200, 38400, 57600, 115200]

    STATUS_COLORS = {
        SessionStatus.IDLE: "#64748B",
        SessionStatus.OPENING: "#F59E0B",
        SessionStatus.STREAMING: "#4CAF50",
        SessionStatus.STOPPED: "#F44336",
    }

    def __init__(self, state: SharedState = None, client_factory=SerialClient.from_config):
        super().__init__()
        self.setWindowTitle("NMEA GPS Viewer")
        self.resize(1100, 700)

        config = get_global_config()
        self.state = state or SharedState(log_capacity=config.log_capacity)
        self.client_factory = client_factory
        self.ingestion_thread = None
        self.last_log_tail = None

        self.signals = StreamSignals()
        self.signals.log_signal.connect(self.append_event)
        self.signals.status_signal.connect(self.update_status)

        self.setup_ui()
        self.refresh_ports()

        self.refresh_timer = QTimer(self)
        self.refresh_timer.timeout.connect(self.refresh_from_state)
        self.refresh_timer.start(config.gui_refresh_ms)

    def setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # Top control bar
        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("COM Port:"))
        self.port_combo = QComboBox()
        self.port_combo.setMinimumWidth(180)
        self.port_combo.setPlaceholderText("Select a Port")
        self.port_combo.currentTextChanged.connect(self.on_port_changed)
        top_bar.addWidget(self.port_combo)

        self.btn_refresh = QPushButton("Refresh")
        self.btn_refresh.clicked.connect(self.refresh_ports)
        top_bar.addWidget(self.btn_refresh)

        top_bar.addWidget(QLabel("Baud:"))
        self.baud_combo = QComboBox()
        self.baud_combo.addItems([str(b) for b in self.BAUD_RATES])
        self.baud_combo.setCurrentText(str(get_global_config().serial_settings.baudrate))
        self.baud_combo.currentTextChanged.connect(self.on_baud_changed)
        top_bar.addWidget(self.baud_combo)

        self.btn_start = QPushButton("Start Reading")
        self.btn_start.clicked.connect(self.on_start)
        top_bar.addWidget(self.btn_start)

        self.btn_stop = QPushButton("Stop")
        self.btn_stop.setEnabled(False)
        self.btn_stop.clicked.connect(self.on_stop)
        top_bar.addWidget(self.btn_stop)

        top_bar.addStretch()
        self.lbl_talkers = QLabel("Talkers: -")
        top_bar.addWidget(self.lbl_talkers)
        self.lbl_status = QLabel()
        top_bar.addWidget(self.lbl_status)
        layout.addLayout(top_bar)

        # Satellites + sky map on the left, raw stream on the right
        splitter = QSplitter(Qt.Orientation.Horizontal)

        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)
        sat_group = QGroupBox("Satellites")
        sat_layout = QVBoxLayout(sat_group)
        self.sat_table = SatelliteTable()
        sat_layout.addWidget(self.sat_table)
        left_layout.addWidget(sat_group, stretch=2)
        self.skyplot = SkyplotWidget()
        left_layout.addWidget(self.skyplot, stretch=1)
        splitter.addWidget(left)

        stream_group = QGroupBox("GPS Stream")
        stream_layout = QVBoxLayout(stream_group)
        stream_layout.addWidget(QLabel("Live NMEA Data:"))
        self.stream_view = QPlainTextEdit()
        self.stream_view.setReadOnly(True)
        self.stream_view.setFont(QFont("Monospace", 9))
        self.stream_view.setMaximumBlockCount(self.state.log_capacity)
        stream_layout.addWidget(self.stream_view)
        splitter.addWidget(stream_group)
        splitter.setSizes([500, 600])
        layout.addWidget(splitter, stretch=1)

        # Session events (open/close/errors)
        self.event_area = QPlainTextEdit()
        self.event_area.setReadOnly(True)
        self.event_area.setMaximumBlockCount(200)
        self.event_area.setMaximumHeight(100)
        layout.addWidget(self.event_area)

        self._show_status(SessionStatus.IDLE, None)

    def refresh_ports(self):
        current = self.port_combo.currentText()
        ports = SerialClient.list_available_ports()
        self.port_combo.blockSignals(True)
        self.port_combo.clear()
        self.port_combo.addItems(ports)
        if current in ports:
            self.port_combo.setCurrentText(current)
        else:
            self.port_combo.setCurrentIndex(-1)
        self.port_combo.blockSignals(False)

    def on_port_changed(self, port):
        if port:
            update_serial_settings({"port": port})
        # A new port means a new session: drop the previous one's data
        if self.state.reset():
            self.last_log_tail = None
            self.refresh_from_state()

    def on_baud_changed(self, text):
        update_serial_settings({"baudrate": int(text)})

    def on_start(self):
        port = self.port_combo.currentText()
        if not port:
            self.append_event("Select a port first")
            return
        thread = start_session(self.state, port, signals=self.signals, client_factory=self.client_factory)
        if thread is None:
            self.append_event("Already reading")
            return
        self.ingestion_thread = thread
        self.append_event(f"Opening {port}...")

    def on_stop(self):
        if self.ingestion_thread is not None:
            self.ingestion_thread.stop()

    def refresh_from_state(self):
        snapshot = self.state.get_state()

        self.sat_table.update_satellites(snapshot.satellites)
        self.skyplot.update_satellites(snapshot.satellites)

        if snapshot.log_tail != self.last_log_tail:
            self.last_log_tail = snapshot.log_tail
            self.stream_view.setPlainText("\n".join(snapshot.log_tail))
            bar = self.stream_view.verticalScrollBar()
            bar.setValue(bar.maximum())
            self.lbl_talkers.setText(f"Talkers: {', '.join(self.talkers_in_log(snapshot.log_tail)) or '-'}")

        self._show_status(snapshot.status, snapshot.stop_reason)
        active = snapshot.status in (SessionStatus.OPENING, SessionStatus.STREAMING)
        self.btn_start.setEnabled(not active)
        self.btn_stop.setEnabled(active)
        self.port_combo.setEnabled(not active)
        self.baud_combo.setEnabled(not active)

    @staticmethod
    def talkers_in_log(lines):
        """Sorted GSV talker IDs (GP, GL, GA, ...) present in the log."""
        return sorted({t for t in map(talker_id, lines) if t})

    def _show_status(self, status, reason):
        text = status.value.upper()
        if status == SessionStatus.STOPPED and reason:
            text = f"{text} ({reason})"
        self.lbl_status.setText(text)
        self.lbl_status.setStyleSheet(
            f"background-color: {self.STATUS_COLORS[status]}; color: white; "
            "padding: 4px 8px; border-radius: 4px; font-weight: bold;"
        )

    @Slot(str)
    def append_event(self, text):
        self.event_area.appendPlainText(f"[{datetime.now().strftime('%H:%M:%S')}] {text}")

    @Slot(str, bool)
    def update_status(self, port, connected):
        self.statusBar().showMessage(f"{port}: {'ON' if connected else 'OFF'}")

    def closeEvent(self, event):
        """Stop the ingestion thread when the window closes."""
        self.refresh_timer.stop()
        if self.ingestion_thread is not None:
            self.ingestion_thread.stop()
        event.accept()
