"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the Session State (reference table, tuner, root, player).
2. Instantiates the Main Window (View).
3. Passes the Model into the View so they can communicate.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox

from harmonicexplorer.logging_config import setup_logging
from harmonicexplorer.model.exceptions import HarmonicExplorerError
from harmonicexplorer.model.state import SessionState
from harmonicexplorer.view.main_window import MainWindow, VISIBLE_APP_NAME

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="harmonicexplorer", description=VISIBLE_APP_NAME)
    parser.add_argument("--debug", action="store_true", help="log everything, including tone and table updates")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the Data Model
    try:
        session = SessionState()
    except (OSError, ValueError, HarmonicExplorerError) as e:
        logger.critical(f"Could not load the reference frequencies: {e}")
        QMessageBox.critical(None, VISIBLE_APP_NAME, f"Could not load the reference frequencies:\n{e}")
        sys.exit(1)

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(session)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
