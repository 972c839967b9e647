"""Pytest configuration.

Imported during collection, so process-wide environment variables needed for
headless Qt and matplotlib are set here.
"""

import os
import tempfile

os.environ.setdefault("MPLBACKEND", "Agg")
os.environ.setdefault("MPLCONFIGDIR", tempfile.mkdtemp(prefix="mplconfig-"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
