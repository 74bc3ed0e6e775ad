"""Component for controlling the shared admission cursor."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from psychometrix.constants.ui_constants import (
    GATE_ACTIVE_LABEL,
    GATE_GROUP_TITLE,
    GATE_NEXT_BUTTON,
    GATE_RESTRICTION_CHECKBOX,
    GATE_STATUS_OPEN,
    GATE_STATUS_TEMPLATE,
)
from psychometrix.core.errors import ValidationError
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.styling.styles import Styles
from psychometrix.ui.dialog_helpers import confirm_lower_active_question, show_error


class GatePanel(QGroupBox):
    """Restriction toggle and active-question selector."""

    def __init__(self, manager: PsychometricManager, parent: QWidget | None = None) -> None:
        super().__init__(GATE_GROUP_TITLE, parent)
        self.manager = manager
        self._seen_version: int | None = None
        self._syncing = False
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.restriction_checkbox = QCheckBox(GATE_RESTRICTION_CHECKBOX, self)
        self.restriction_checkbox.toggled.connect(self._handle_restriction_toggled)
        layout.addWidget(self.restriction_checkbox)

        active_row = QHBoxLayout()
        active_row.addWidget(QLabel(GATE_ACTIVE_LABEL, self))
        self.active_spinbox = QSpinBox(self)
        self.active_spinbox.setRange(1, self.manager.get_total_question_count())
        self.active_spinbox.setKeyboardTracking(False)
        self.active_spinbox.valueChanged.connect(self._handle_active_changed)
        active_row.addWidget(self.active_spinbox)
        active_row.addStretch()

        self.next_button = QPushButton(GATE_NEXT_BUTTON, self)
        self.next_button.clicked.connect(self._handle_next_clicked)
        active_row.addWidget(self.next_button)
        layout.addLayout(active_row)

        self.status_label = QLabel("", self)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

    def refresh(self) -> None:
        """Pull the cursor from the manager; changes may come from the web admin page too."""
        version = self.manager.get_cursor_version()
        if version == self._seen_version:
            return
        self._seen_version = version
        cursor = self.manager.get_admission_cursor()

        self._syncing = True
        try:
            self.restriction_checkbox.setChecked(cursor.restriction_enabled)
            self.active_spinbox.setValue(cursor.active_question)
        finally:
            self._syncing = False

        self.next_button.setEnabled(cursor.active_question < self.manager.get_total_question_count())
        if not cursor.restriction_enabled:
            self.status_label.setText(GATE_STATUS_OPEN)
        else:
            round_name, local_id = self.manager.locate_question(cursor.active_question)
            self.status_label.setText(
                GATE_STATUS_TEMPLATE.format(
                    active=cursor.active_question,
                    location=f"{round_name} question {local_id}",
                )
            )
        self.status_label.setStyleSheet(Styles.get_gate_status_style(cursor.restriction_enabled))

    def _handle_restriction_toggled(self, checked: bool) -> None:
        if self._syncing:
            return
        self.manager.set_restriction(checked)
        self.refresh()

    def _handle_active_changed(self, value: int) -> None:
        if self._syncing:
            return
        current = self.manager.get_admission_cursor().active_question
        if value < current and not confirm_lower_active_question(self, value, current):
            self._seen_version = None
            self.refresh()
            return
        try:
            self.manager.set_active_question(value)
        except ValidationError as exc:
            show_error(self, "Invalid question", str(exc))
        self.refresh()

    def _handle_next_clicked(self) -> None:
        self.manager.activate_next_question()
        self.refresh()
