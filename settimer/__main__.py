"""Allow running SetTimer as a module: python -m settimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .app import SetTimerApp


def main() -> None:
    debug = os.environ.get("SETTIMER_DEBUG") == "1"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("SetTimer")
    app.setOrganizationName("SetTimer")

    window = SetTimerApp()
    window.show()
    logging.getLogger(__name__).info("SetTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
