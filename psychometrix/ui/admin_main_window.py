"""Qt main window for the test administrator."""

from __future__ import annotations

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from psychometrix.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from psychometrix.constants.ui_constants import (
    ABOUT_BUTTON,
    CURSOR_REFRESH_INTERVAL_MS,
    HELP_BUTTON,
    PARTICIPANT_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.styling.styles import Styles
from psychometrix.ui.components.dashboard_panel import DashboardPanel
from psychometrix.ui.components.gate_panel import GatePanel
from psychometrix.ui.dialog_helpers import show_info


class AdminMainWindow(QMainWindow):
    """Gate controls on top, dashboard below."""

    def __init__(self, manager: PsychometricManager, participant_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.manager = manager
        self.participant_url = participant_url or PARTICIPANT_URL_PLACEHOLDER

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.network_label = QLabel(f"Participants connect to: {self.participant_url}", self)
        self.network_label.setWordWrap(True)
        self.network_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.network_label, stretch=1)

        self.about_button = QPushButton(ABOUT_BUTTON, self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)

        self.help_button = QPushButton(HELP_BUTTON, self)
        self.help_button.clicked.connect(self._handle_help)
        header_row.addWidget(self.help_button)
        root_layout.addLayout(header_row)

        self.session_label = QLabel("", self)
        root_layout.addWidget(self.session_label)

        self.gate_panel = GatePanel(self.manager, self)
        root_layout.addWidget(self.gate_panel)

        self.dashboard_panel = DashboardPanel(self.manager, self)
        root_layout.addWidget(self.dashboard_panel, stretch=1)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(CURSOR_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()
        self._refresh_state()

    def _refresh_state(self) -> None:
        self.gate_panel.refresh()
        self.session_label.setText(f"{self.manager.get_session_count()} active session(s)")

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)
