"""Helper functions for common dialog patterns in the admin console."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def show_error(parent: QWidget, title: str, message: str) -> None:
    """Show error dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    """Show information dialog."""
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    msg_box.exec()


def confirm_lower_active_question(parent: QWidget, new_index: int, current_index: int) -> bool:
    """Ask before moving the gate backwards.

    Participants keep answers they already recorded past the new bound; they
    just cannot move forward until the gate is raised again.
    """
    reply = QMessageBox.question(
        parent,
        "Lower Active Question",
        (
            f"Move the active question back from {current_index} to {new_index}? "
            "Participants beyond it will be held where they are."
        ),
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes
