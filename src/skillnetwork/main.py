"""
Application Initialization
==========================
This module wires the skill-network window together and starts the Qt Event
Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging (level from SKILLNETWORK_LOG_LEVEL).
2. Chooses the Analysis Service: a saved response given on the command line,
   or the bundled sample network.
3. Instantiates the Main Window and triggers the first fetch.
"""
import sys

from PySide6.QtWidgets import QApplication

from skillnetwork.config import SAMPLE_NETWORK_PATH
from skillnetwork.logging_config import level_from_env, setup_logging
from skillnetwork.model.io import FileAnalysisService
from skillnetwork.view.main_window import SkillNetworkWindow


def main() -> None:
    # 1. Setup Logging
    setup_logging(level=level_from_env())

    # 2. Create the Qt Application
    app = QApplication(sys.argv)
    app.setApplicationName("Skill Network")

    # 3. Pick the network source
    args = app.arguments()[1:]
    network_path = args[0] if args else SAMPLE_NETWORK_PATH
    service = FileAnalysisService(network_path)

    # 4. Initialize the Main Window and load the network
    window = SkillNetworkWindow(service)
    window.show()
    window.fetch()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
