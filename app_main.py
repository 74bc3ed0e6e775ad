"""Application entry point for PsychoMetrix."""

from __future__ import annotations

import socket
import sys

from psychometrix.config import get_settings
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.core.services.backend_client import BackendClient
from psychometrix.server.api_server import run_api_server, start_api_server
from psychometrix.utils.logging_config import configure_logging


def _determine_participant_url(port: int) -> str:
    """Best-effort determination of the local IP for the participant-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the API server, and launch the admin console."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting PsychoMetrix…")

    manager = PsychometricManager(
        BackendClient.from_settings(settings),
        admin_passcode=settings.admin_passcode,
    )
    if settings.admin_passcode is None:
        logger.info("No admin passcode configured; browser admin login is disabled")
    participant_url = _determine_participant_url(settings.port)
    logger.info("Participant page available at %s", participant_url)

    if settings.headless:
        run_api_server(manager, host=settings.host, port=settings.port)
        return

    from PySide6.QtWidgets import QApplication

    from psychometrix.ui.admin_main_window import AdminMainWindow

    start_api_server(manager, host=settings.host, port=settings.port)
    app = QApplication(sys.argv)
    window = AdminMainWindow(manager=manager, participant_url=participant_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
