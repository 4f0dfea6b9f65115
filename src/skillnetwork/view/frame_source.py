"""
QTimer-backed frame source for the simulation scheduler.
"""
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from skillnetwork.config import FRAME_INTERVAL_MS


class QtFrameSource(QObject):
    """Fires the registered callback on every timer timeout (display refresh)."""

    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()
