"""
Qt-side checks: the QTimer frame source, window teardown and the canvas.
Runs on the offscreen platform, so no display is needed.
"""
import os
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip("PySide6")

from PySide6.QtCore import QEventLoop, QTimer
from PySide6.QtGui import QImage
from PySide6.QtWidgets import QApplication

from skillnetwork.config import SAMPLE_NETWORK_PATH
from skillnetwork.controller.scheduler import SchedulerState, SimulationScheduler
from skillnetwork.model.io import FileAnalysisService
from skillnetwork.view.canvas import SkillNetworkCanvas
from skillnetwork.view.frame_source import QtFrameSource
from skillnetwork.view.main_window import SkillNetworkWindow


class SlowAnalysisService:
    def __init__(self, payload, delay=0.3):
        self.payload = payload
        self.delay = delay

    def generate_skill_network(self, resume_text=""):
        time.sleep(self.delay)
        return self.payload


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    # Closing a test window must not end the event loops the tests spin
    app.setQuitOnLastWindowClosed(False)
    return app


def _spin(ms):
    """Run the Qt event loop for `ms` milliseconds."""
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


def test_timer_stop_cancels_ticks(qapp, skill_graph):
    source = QtFrameSource(interval_ms=1)
    scheduler = SimulationScheduler(source)
    scheduler.load(skill_graph)

    _spin(100)
    assert scheduler.tick_count > 0
    assert source.is_active

    scheduler.stop()
    ticks_at_stop = scheduler.tick_count
    _spin(100)

    assert not source.is_active
    assert scheduler.tick_count == ticks_at_stop


def test_closing_window_stops_simulation(qapp, skill_graph):
    window = SkillNetworkWindow(FileAnalysisService(SAMPLE_NETWORK_PATH), frame_interval_ms=1)
    window.show()
    window.show_model(skill_graph)

    _spin(100)
    assert window.scheduler.tick_count > 0

    window.close()
    ticks_at_close = window.scheduler.tick_count
    _spin(100)

    assert window.scheduler.state is SchedulerState.STOPPED
    assert not window.frame_source.is_active
    assert window.scheduler.tick_count == ticks_at_close


def test_close_waits_for_running_fetch(qapp):
    payload = {"nodes": [{"id": "Python"}, {"id": "SQL"}],
               "links": [{"source": "Python", "target": "SQL", "value": 2}]}
    window = SkillNetworkWindow(SlowAnalysisService(payload))
    window.show()
    window.fetch()
    worker = window.fetch_worker
    assert worker.isRunning()

    window.close()

    assert worker.isFinished()
    assert window.fetch_worker is None
    # The late payload must not start a simulation on the closed window
    _spin(50)
    assert window.scheduler.model is None
    assert window.scheduler.tick_count == 0


def test_canvas_draws_size_caption(qapp):
    canvas = SkillNetworkCanvas()
    canvas.resize(800, 600)
    image = QImage(canvas.size(), QImage.Format_ARGB32)
    image.fill(0)

    canvas.render(image)

    rect = canvas.caption_rect()
    caption_pixel = image.pixelColor(int(rect.left()) + 4, int(rect.center().y()))
    background_pixel = image.pixelColor(400, 300)

    assert rect.right() <= canvas.width()
    assert rect.bottom() <= canvas.height()
    assert caption_pixel.lightness() > 150
    assert background_pixel.lightness() < 100
