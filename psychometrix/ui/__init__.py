"""Qt UI components for the administrator console."""

from .admin_main_window import AdminMainWindow
from .dialog_helpers import confirm_lower_active_question, show_error, show_info

__all__ = [
    "AdminMainWindow",
    "confirm_lower_active_question",
    "show_error",
    "show_info",
]
