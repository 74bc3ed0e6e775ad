"""Component summarizing feedback, assessments and users for the administrator."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from psychometrix.constants.quiz_constants import RATING_MAX, RATING_MIN
from psychometrix.constants.ui_constants import (
    DASHBOARD_EMPTY_STATE,
    DASHBOARD_GROUP_TITLE,
    DASHBOARD_REFRESH_BUTTON,
    DASHBOARD_TOTALS_TEMPLATE,
)
from psychometrix.core.errors import RemoteServiceError
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.core.services.dashboard_stats import DashboardSnapshot, RatingHistogram
from psychometrix.ui.dialog_helpers import show_error


def format_histogram(histogram: RatingHistogram) -> str:
    parts = [
        f"{rating}★ {histogram.count_for(rating)} ({histogram.percentage(rating):.1f}%)"
        for rating in range(RATING_MIN, RATING_MAX + 1)
    ]
    return f"{histogram.prompt}\n  " + "  ".join(parts) + f"  | total {histogram.total}"


def format_counts(title: str, counts: dict[str, int]) -> str:
    if not counts:
        return f"{title}: none"
    return f"{title}: " + ", ".join(f"{label} {count}" for label, count in counts.items())


class DashboardPanel(QGroupBox):
    """Read-only dashboard fed by the assessment backend's admin collections."""

    def __init__(self, manager: PsychometricManager, parent: QWidget | None = None) -> None:
        super().__init__(DASHBOARD_GROUP_TITLE, parent)
        self.manager = manager
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.totals_label = QLabel(DASHBOARD_EMPTY_STATE, self)
        layout.addWidget(self.totals_label)

        self.summary_list = QListWidget(self)
        self.summary_list.setAlternatingRowColors(True)
        self.summary_list.setWordWrap(True)
        layout.addWidget(self.summary_list, stretch=1)

        self.refresh_button = QPushButton(DASHBOARD_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.reload)
        layout.addWidget(self.refresh_button, alignment=Qt.AlignRight)

    def reload(self) -> None:
        self.refresh_button.setEnabled(False)
        try:
            snapshot = self.manager.fetch_dashboard()
        except RemoteServiceError as exc:
            show_error(self, "Dashboard unavailable", exc.message)
            return
        finally:
            self.refresh_button.setEnabled(True)
        self.show_snapshot(snapshot)

    def show_snapshot(self, snapshot: DashboardSnapshot) -> None:
        self.totals_label.setText(
            DASHBOARD_TOTALS_TEMPLATE.format(
                feedbacks=snapshot.feedback_count,
                assessments=snapshot.assessment_count,
                users=snapshot.user_count,
            )
        )
        self.summary_list.clear()
        for histogram in snapshot.feedback.values():
            QListWidgetItem(format_histogram(histogram), self.summary_list)
        QListWidgetItem(format_counts("Users by type", snapshot.user_types), self.summary_list)
        QListWidgetItem(
            format_counts("Assessments by trait", snapshot.personality_results), self.summary_list
        )
        for comment in snapshot.comments:
            QListWidgetItem(f"“{comment}”", self.summary_list)
