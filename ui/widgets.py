# ui/widgets.py
import numpy as np
import matplotlib
matplotlib.use('QtAgg')
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from PySide6.QtWidgets import QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView
from PySide6.QtCore import Qt


class SkyplotWidget(FigureCanvas):
    """Polar sky map: north up, azimuth clockwise, zenith in the centre."""
    def __init__(self, parent=None, size_in: float = 3.0):
        self.fig = Figure(figsize=(size_in, size_in), dpi=100, facecolor='#ffffff')
        self.ax = self.fig.add_subplot(111, projection='polar')
        super().__init__(self.fig)
        self.setParent(parent)
        # Axes are configured once; updates only swap the artists
        self.init_plot()
        self.scatter_artists = []
        self.text_artists = []
        self._last_satellites = None

    def init_plot(self):
        self.ax.set_theta_zero_location('N')
        self.ax.set_theta_direction(-1)
        self.ax.set_rlim(90, 0)
        self.ax.set_yticks([0, 30, 60, 90])
        self.ax.set_yticklabels(['90', '60', '30', '0'])
        self.ax.grid(True, alpha=0.3)
        self.ax.set_title("Sky", pad=10, fontsize=9, fontweight='bold')

    def update_satellites(self, satellites):
        """
        Redraw satellite markers.

        Args:
            satellites: sequence of SatelliteRecord
        """
        satellites = tuple(satellites)
        # Records are immutable, so equal tuples draw identically
        if satellites == self._last_satellites:
            return
        self._last_satellites = satellites

        for artist in self.scatter_artists:
            artist.remove()
        for artist in self.text_artists:
            artist.remove()
        self.scatter_artists.clear()
        self.text_artists.clear()

        for sat in satellites:
            theta = np.radians(sat.azimuth)
            scatter = self.ax.scatter(theta, sat.elevation, c='#2563EB', s=60, alpha=0.8, edgecolors='white')
            text = self.ax.text(theta, sat.elevation, sat.id, fontsize=8, ha='center', va='bottom', fontweight='bold')
            self.scatter_artists.append(scatter)
            self.text_artists.append(text)

        self.draw_idle()


class SatelliteTable(QTableWidget):
    """ID / elevation / azimuth / strength listing of the current snapshot."""
    HEADERS = ["ID", "Elv (°)", "Azm (°)", "Strength"]

    def __init__(self, parent=None):
        super().__init__(0, len(self.HEADERS), parent)
        self.setHorizontalHeaderLabels(self.HEADERS)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.verticalHeader().setVisible(False)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._last_rows = None

    def update_satellites(self, satellites):
        rows = [
            (sat.id, f"{sat.elevation:.2f}", f"{sat.azimuth:.2f}", str(sat.strength))
            for sat in satellites
        ]
        # Skip the rebuild when nothing changed
        if rows == self._last_rows:
            return
        self._last_rows = rows

        self.setUpdatesEnabled(False)
        try:
            self.setRowCount(len(rows))
            for r, row in enumerate(rows):
                for c, value in enumerate(row):
                    item = QTableWidgetItem(value)
                    item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                    self.setItem(r, c, item)
        finally:
            self.setUpdatesEnabled(True)
