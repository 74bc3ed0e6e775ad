"""Static metadata describing PsychoMetrix."""

APP_NAME = "PsychoMetrix"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "PsychoMetrix runs a psychometric test for a room of participants. "
    "Participants join from the browser; the administrator console decides "
    "which question is currently unlocked and summarizes collected feedback."
)

HELP_TEXT = (
    "Tick 'Restrict progression' to hold every participant at the active question. "
    "Questions are numbered across both rounds: scenario questions come first, "
    "image-perception questions continue the numbering. Use 'Activate Next Question' "
    "to release the next one. 'Refresh Dashboard' reloads feedback, assessments and "
    "registered users from the assessment backend."
)
