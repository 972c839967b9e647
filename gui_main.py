#!/usr/bin/env python3
"""
NMEA GPS Viewer
Main GUI Application Entry Point
"""

import logging
import sys
from PySide6.QtWidgets import QApplication
from ui.main_window import ViewerWindow

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("NMEA GPS Viewer")
    app.setApplicationVersion("0.1")
    app.setStyle("Fusion")

    window = ViewerWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
