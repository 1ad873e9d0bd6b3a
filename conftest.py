"""Shared test fixtures."""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PyQt5.QtCore import QEventLoop, QTimer  # noqa: E402
from PyQt5.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope='session')
def qapp():
    """One QApplication for timers and widgets (offscreen platform)."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def run_event_loop(qapp):
    """Spin the Qt event loop for `ms` milliseconds so pending timers fire."""
    def run(ms):
        loop = QEventLoop()
        QTimer.singleShot(ms, loop.quit)
        loop.exec_()
        qapp.processEvents()
    return run
