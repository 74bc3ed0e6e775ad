"""Draft of the six-question feedback form."""

from __future__ import annotations

from psychometrix.constants.quiz_constants import FEEDBACK_QUESTIONS, RATING_MAX, RATING_MIN
from psychometrix.core.errors import StageTransitionError, ValidationError


class FeedbackForm:
    """Holds ratings and comment until they are successfully submitted."""

    def __init__(self) -> None:
        self._ratings: dict[str, int | None] = {key: None for key in FEEDBACK_QUESTIONS}
        self._comment: str = ""
        self._submitting: bool = False
        self._submit_error: str | None = None

    def set_rating(self, key: str, value: int | None) -> None:
        if key not in self._ratings:
            raise ValidationError(f"Unknown feedback question: {key}")
        if value is not None and not RATING_MIN <= value <= RATING_MAX:
            raise ValidationError(f"Ratings must be between {RATING_MIN} and {RATING_MAX}.")
        self._ratings[key] = value

    def set_comment(self, text: str | None) -> None:
        self._comment = text or ""

    def get_ratings(self) -> dict[str, int | None]:
        return dict(self._ratings)

    def get_comment(self) -> str:
        return self._comment

    def missing_ratings(self) -> list[str]:
        return [key for key, value in self._ratings.items() if value is None]

    @property
    def can_submit(self) -> bool:
        return not self._submitting and not self.missing_ratings()

    def is_submitting(self) -> bool:
        return self._submitting

    def get_submit_error(self) -> str | None:
        return self._submit_error

    def payload(self) -> dict[str, object]:
        if self.missing_ratings():
            raise ValidationError("Please complete all ratings before submitting.")
        return {
            "feedbackScores": dict(self._ratings),
            "additionalComments": self._comment.strip() or None,
        }

    def begin_submit(self) -> dict[str, object]:
        """Validate, set the submit latch and return the request body."""
        if self._submitting:
            raise StageTransitionError("Feedback is already being submitted.")
        body = self.payload()
        self._submitting = True
        self._submit_error = None
        return body

    def fail_submit(self, message: str) -> None:
        self._submitting = False
        self._submit_error = message

    def finish_submit(self) -> None:
        self._submitting = False
        self._submit_error = None
