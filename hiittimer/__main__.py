"""Allow running HIIT Timer as a module: python -m hiittimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .app import HIITTimerApp

LOG_LEVEL_ENV = "HIITTIMER_LOG_LEVEL"


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("HIIT Timer")
    app.setOrganizationName("HIITTimer")

    window = HIITTimerApp()
    window.show()
    logging.getLogger(__name__).info("HIIT Timer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
