"""Traversal of one ordered question sequence."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum, auto
import logging

from psychometrix.constants.quiz_constants import IMAGE_ANSWERS_PLACEHOLDER, MISSING_ROLL_NUMBER
from psychometrix.core.answer_encoding import encode_answers
from psychometrix.core.errors import StageTransitionError, ValidationError
from psychometrix.core.models import AdmissionCursor, QuestionDefinition, RoundKind, User
from psychometrix.core.services.admission_gate import AdmissionGate
from psychometrix.core.services.answer_store import AnswerStore

logger = logging.getLogger(__name__)


class AdvanceOutcome(Enum):
    """Result of a call to RoundController.advance."""

    MOVED = auto()
    BLOCKED = auto()
    SUBMISSION_REQUIRED = auto()
    COMPLETED = auto()
    IGNORED = auto()


class RoundController:
    """Manages position, selections and completion of a single round."""

    def __init__(
        self,
        kind: RoundKind,
        questions: Sequence[QuestionDefinition],
        gate: AdmissionGate,
        *,
        requires_submission: bool,
    ) -> None:
        if not questions:
            raise ValueError("A round needs at least one question.")
        self.kind = kind
        self._questions = tuple(questions)
        self._gate = gate
        self._requires_submission = requires_submission
        self._store = AnswerStore(q.id for q in self._questions)
        self._position = 1
        self._submitting = False
        self._complete = False
        self._submission_error: str | None = None
        self._store.present(self._position)

    # --- Read-only state ---

    @property
    def current_position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def gate(self) -> AdmissionGate:
        return self._gate

    def is_submitting(self) -> bool:
        return self._submitting

    def is_complete(self) -> bool:
        return self._complete

    def is_last_question(self) -> bool:
        return self._position == self.total

    def get_submission_error(self) -> str | None:
        return self._submission_error

    def get_current_question(self) -> QuestionDefinition:
        return self._questions[self._position - 1]

    def get_selected_option(self, question_id: int | None = None) -> int | None:
        return self._store.selected_option(question_id or self._position)

    def get_answers(self) -> dict[int, int]:
        return self._store.answers()

    def progress_percentage(self) -> float:
        return (self._position / self.total) * 100

    # --- Actions ---

    def select_option(self, question_id: int, option_index: int) -> bool:
        """Record the first selection for the current question.

        Selections for any other question, repeated selections and
        selections while submitting are ignored.
        """
        if self._submitting or self._complete or question_id != self._position:
            return False
        if self._store.has_answer(question_id):
            return False
        question = self.get_current_question()
        if not 0 <= option_index < question.option_count:
            raise ValidationError(
                f"Option {option_index} is not valid for question {question_id}; "
                f"choose 0 to {question.option_count - 1}."
            )
        return self._store.record(question_id, option_index)

    def is_question_admitted(self, cursor: AdmissionCursor) -> bool:
        return self._gate.can_advance(self._position, cursor)

    def can_advance(self, cursor: AdmissionCursor) -> bool:
        if self._submitting or self._complete:
            return False
        if not self._store.has_answer(self._position):
            return False
        return self.is_question_admitted(cursor)

    def advance(self, cursor: AdmissionCursor) -> AdvanceOutcome:
        if self._submitting or self._complete:
            return AdvanceOutcome.IGNORED
        if not self.can_advance(cursor):
            return AdvanceOutcome.BLOCKED
        if self._position < self.total:
            self._position += 1
            self._store.present(self._position)
            return AdvanceOutcome.MOVED
        if self._requires_submission:
            self._submitting = True
            self._submission_error = None
            return AdvanceOutcome.SUBMISSION_REQUIRED
        self._finish()
        return AdvanceOutcome.COMPLETED

    def submission_payload(self, user: User) -> dict[str, object]:
        """Body of the assessment submission for this round."""
        return {
            "user": {
                "name": user.name,
                "userType": user.user_type.value,
                "rollNumber": user.roll_number or MISSING_ROLL_NUMBER,
            },
            "questionAnswers": encode_answers(self._store.answers()),
            "imageAnswers": list(IMAGE_ANSWERS_PLACEHOLDER),
        }

    def complete_submission(self) -> Mapping[int, int]:
        if not self._submitting:
            raise StageTransitionError("No submission is in progress for this round.")
        self._submitting = False
        return self._finish()

    def fail_submission(self, message: str) -> None:
        """Release the latch and keep position and answers for a retry."""
        self._submitting = False
        self._submission_error = message

    def answers(self) -> Mapping[int, int]:
        """The frozen answer map of a completed round."""
        if not self._complete:
            raise StageTransitionError("Round is not complete yet.")
        return self._store.freeze()

    def _finish(self) -> Mapping[int, int]:
        frozen = self._store.freeze()
        self._complete = True
        self._submission_error = None
        logger.info("Round %s completed with %d answers", self.kind.value, len(frozen))
        return frozen
