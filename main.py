"""Entry point: configure logging and open the main window."""
from __future__ import annotations

import logging
import sys

from core.config.config_service import config_service
from core.logging.log_setup import configure_logging


def main(argv: list[str] | None = None) -> int:
    configure_logging(config_service.logging)
    log = logging.getLogger("docsign")
    log.info("Starting DocSign")

    from framework.gui.main_window import MainWindow

    app = MainWindow()
    args = sys.argv[1:] if argv is None else argv
    if args and hasattr(app.active_view, "open_path"):
        app.active_view.open_path(args[0])
    app.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
