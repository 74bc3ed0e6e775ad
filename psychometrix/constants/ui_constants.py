"""Qt UI constants used across the administrator console."""

WINDOW_TITLE: str = "PsychoMetrix Admin Console"
PARTICIPANT_URL_PLACEHOLDER: str = "http://<admin-ip>:8000/"
CURSOR_REFRESH_INTERVAL_MS: int = 1000

GATE_GROUP_TITLE: str = "Question Gate"
GATE_RESTRICTION_CHECKBOX: str = "Restrict progression to the active question"
GATE_ACTIVE_LABEL: str = "Active question:"
GATE_NEXT_BUTTON: str = "Activate Next Question"
GATE_STATUS_OPEN: str = "Progression is unrestricted."
GATE_STATUS_TEMPLATE: str = "Participants may answer up to question {active} ({location})."

DASHBOARD_GROUP_TITLE: str = "Dashboard"
DASHBOARD_REFRESH_BUTTON: str = "Refresh Dashboard"
DASHBOARD_EMPTY_STATE: str = "No dashboard data loaded yet."
DASHBOARD_TOTALS_TEMPLATE: str = (
    "{feedbacks} feedback record(s), {assessments} assessment(s), {users} user(s)"
)

ABOUT_BUTTON: str = "About"
HELP_BUTTON: str = "Help"
