"""Test-flow constants shared across the core, server and UI layers."""

OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
MIN_OPTION_COUNT: int = 2
MAX_OPTION_COUNT: int = len(OPTION_LETTERS)

# The assessment backend still expects this field even though perception
# answers are only interpreted locally.
IMAGE_ANSWERS_PLACEHOLDER: tuple[str, ...] = ("1", "2", "3")
MISSING_ROLL_NUMBER: str = "N/A"

RATING_MIN: int = 1
RATING_MAX: int = 5

FEEDBACK_QUESTIONS: dict[str, str] = {
    "personalityRating": "Did this quiz help understand your personality better?",
    "scenarioRating": "Did scenarios reflect real decision-making?",
    "accuracyRating": "Did personality result feel accurate?",
    "engagementRating": "Was the experience engaging?",
    "insightRating": "Did it make you think in new ways?",
    "recommendRating": "Would you recommend to others?",
}

RATING_LABELS: tuple[str, ...] = (
    "Nope, not at all",
    "Eh, kinda",
    "Hmm, makes sense",
    "Whoa, that was cool",
    "OMG, this read my mind",
)

SCENARIO_BANK_FILE: str = "scenario_questions.txt"
PERCEPTION_BANK_FILE: str = "perception_questions.txt"
