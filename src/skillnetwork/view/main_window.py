"""
Main Application Window
=======================
The skill-network window: menu bar, the canvas and a status bar.

Why is this file needed?
------------------------
1. Layout: It hosts the canvas that draws the simulated network.
2. Routing: It connects File -> Open / Reload to the fetch worker and hands
   validated graphs to the scheduler.
3. Teardown: Closing the window stops the scheduler, so no tick outlives
   the view.
"""
import logging
import os
from typing import Optional

from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QFileDialog, QMainWindow, QMessageBox

from skillnetwork.config import FRAME_INTERVAL_MS
from skillnetwork.controller.scheduler import SimulationScheduler
from skillnetwork.controller.workers import NetworkFetchWorker, prepare_graph_model
from skillnetwork.model.graph import GraphModel, GraphValidationError
from skillnetwork.model.io import AnalysisService, FileAnalysisService
from skillnetwork.model.state import RenderSnapshot
from skillnetwork.view.canvas import SkillNetworkCanvas
from skillnetwork.view.frame_source import QtFrameSource

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Skill Network"


class SkillNetworkWindow(QMainWindow):
    def __init__(
        self,
        service: AnalysisService,
        resume_text: str = "",
        frame_interval_ms: int = FRAME_INTERVAL_MS,
    ) -> None:
        super().__init__()
        self.service: AnalysisService = service
        self.resume_text: str = resume_text
        self.fetch_worker: Optional[NetworkFetchWorker] = None
        self._closing: bool = False

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1000, 750)

        # --- CANVAS ---
        self.canvas = SkillNetworkCanvas()
        self.setCentralWidget(self.canvas)

        # --- SIMULATION LOOP ---
        self.frame_source = QtFrameSource(frame_interval_ms, parent=self)
        self.scheduler = SimulationScheduler(self.frame_source, on_frame=self.on_frame)

        self._create_menu()
        self.statusBar().showMessage("Ready")

    def _create_menu(self) -> None:
        menu_file = self.menuBar().addMenu("&File")

        act_open = QAction("&Open Network...", self)
        act_open.setShortcut(QKeySequence.Open)
        act_open.triggered.connect(self.on_open_clicked)
        menu_file.addAction(act_open)

        act_reload = QAction("&Reload", self)
        act_reload.setShortcut(QKeySequence.Refresh)
        act_reload.triggered.connect(self.fetch)
        menu_file.addAction(act_reload)

        menu_file.addSeparator()

        act_exit = QAction("E&xit", self)
        act_exit.triggered.connect(self.close)
        menu_file.addAction(act_exit)

    # ------------------------------------------------------------------------------
    # Fetch / load
    # ------------------------------------------------------------------------------

    def on_open_clicked(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Skill Network", "", "Skill network (*.json);;All files (*)"
        )
        if not path:
            return
        self.service = FileAnalysisService(path)
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - {os.path.basename(path)}")
        self.fetch()

    def fetch(self) -> None:
        """Tear down the current layout and request a fresh network."""
        if self.fetch_worker is not None and self.fetch_worker.isRunning():
            logger.debug("Fetch already in progress, ignoring request.")
            return

        self.scheduler.stop()
        self.canvas.clear()
        self.statusBar().showMessage("Mapping your skill universe...")

        self.fetch_worker = NetworkFetchWorker(self.service, self.resume_text)
        self.fetch_worker.network_ready.connect(self.on_network_ready)
        self.fetch_worker.error_occurred.connect(self.on_fetch_error)
        self.fetch_worker.start()

    def on_network_ready(self, payload: object) -> None:
        if self._closing:
            return
        try:
            model = prepare_graph_model(payload)
        except GraphValidationError as e:
            logger.error(f"Malformed skill network: {e}")
            self.show_error(f"The skill network could not be read:\n{e}")
            return
        self.show_model(model)

    def show_model(self, model: GraphModel) -> None:
        self.scheduler.load(model)
        message = f"{len(model.nodes)} skills, {len(model.links)} links"
        if model.dropped_links:
            message += f" ({model.dropped_links} invalid links ignored)"
        self.statusBar().showMessage(message)

    def on_fetch_error(self, message: str) -> None:
        if self._closing:
            return
        self.show_error(f"The skill network could not be loaded:\n{message}")

    def show_error(self, message: str) -> None:
        self.statusBar().showMessage("Skill network unavailable")
        answer = QMessageBox.critical(
            self, "Error", message,
            QMessageBox.Retry | QMessageBox.Cancel, QMessageBox.Retry
        )
        if answer == QMessageBox.Retry:
            # The worker has already emitted its result and is only returning
            if self.fetch_worker is not None:
                self.fetch_worker.wait()
            self.fetch()

    # ------------------------------------------------------------------------------
    # Frames / teardown
    # ------------------------------------------------------------------------------

    def on_frame(self, snapshot: RenderSnapshot) -> None:
        self.canvas.set_snapshot(snapshot)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._closing = True
        self.scheduler.stop()

        # A running QThread must not be destroyed with the window
        worker = self.fetch_worker
        if worker is not None:
            worker.network_ready.disconnect(self.on_network_ready)
            worker.error_occurred.disconnect(self.on_fetch_error)
            worker.wait()
            self.fetch_worker = None
        event.accept()
