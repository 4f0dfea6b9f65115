"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for talking to the Analysis Service.

Why is this file needed?
------------------------
1. Responsiveness: The service call may take seconds. Running it on the main
   thread would freeze the window, so it is pushed to a background thread.
2. Ordering: The worker only delivers the raw payload. The GraphModel is built
   and the simulation started on the main thread, strictly after the fetch
   has completed, so no network call ever happens inside a tick.

Classes:
    NetworkFetchWorker: Fetches one skill-network payload.
"""
import logging
from typing import Any

from PySide6.QtCore import QThread, Signal

from skillnetwork.model.graph import GraphModel
from skillnetwork.model.io import AnalysisService

logger = logging.getLogger(__name__)


def prepare_graph_model(payload: Any) -> GraphModel:
    """
    Validate a fetched payload into a GraphModel.

    Must be called in the MAIN THREAD, right before handing the model to the
    scheduler. Raises GraphValidationError for malformed payloads.
    """
    logger.info("Building skill graph from analysis payload...")
    return GraphModel.from_response(payload)


class NetworkFetchWorker(QThread):
    # Signals to update the UI from the background
    network_ready = Signal(object)  # dict payload
    error_occurred = Signal(str)

    def __init__(self, service: AnalysisService, resume_text: str = "") -> None:
        super().__init__()
        self.service = service
        self.resume_text = resume_text

    def run(self) -> None:
        try:
            logger.info(f"Requesting skill network from {self.service!r}...")
            payload = self.service.generate_skill_network(self.resume_text)
        except Exception as e:
            logger.error(f"Error in NetworkFetchWorker: {e}")
            self.error_occurred.emit(str(e))
            return

        self.network_ready.emit(payload)
