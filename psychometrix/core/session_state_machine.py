"""Stage sequencing for one participant session."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from psychometrix.core.errors import StageTransitionError
from psychometrix.core.models import (
    AdmissionCursor,
    AssessmentReceipt,
    PersonalityReport,
    QuestionDefinition,
    Role,
    RoundKind,
    Stage,
    User,
)
from psychometrix.core.services.admission_gate import AdmissionGate
from psychometrix.core.services.feedback_form import FeedbackForm
from psychometrix.core.services.round_controller import AdvanceOutcome, RoundController

logger = logging.getLogger(__name__)

_EMPTY_ANSWERS: Mapping[int, int] = MappingProxyType({})


class SessionStateMachine:
    """Drives landing -> instructions -> questions -> imagePerception -> report -> feedback.

    Stages only move forward; the single way back is reset(), used after
    feedback submission, by logout() and when an idle session is evicted.
    """

    def __init__(
        self,
        scenario_questions: Sequence[QuestionDefinition],
        perception_questions: Sequence[QuestionDefinition],
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid4().hex
        self._scenario_questions = tuple(scenario_questions)
        self._perception_questions = tuple(perception_questions)
        self._clear()

    def _clear(self) -> None:
        self._stage = Stage.LANDING
        self._user: User | None = None
        self._role = Role.PARTICIPANT
        self._round: RoundController | None = None
        self._server_user_id: str | None = None
        self._assessment_data: dict[str, Any] = {}
        self._question_answers: Mapping[int, int] = _EMPTY_ANSWERS
        self._image_answers: Mapping[int, int] = _EMPTY_ANSWERS
        self._report: PersonalityReport | None = None
        self._report_error: str | None = None
        self._feedback = FeedbackForm()

    # --- Read-only state ---

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def role(self) -> Role:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role is Role.ADMINISTRATOR

    @property
    def current_round(self) -> RoundController | None:
        return self._round

    @property
    def server_user_id(self) -> str | None:
        return self._server_user_id

    @property
    def assessment_data(self) -> dict[str, Any]:
        return dict(self._assessment_data)

    @property
    def question_answers(self) -> Mapping[int, int]:
        return self._question_answers

    @property
    def image_answers(self) -> Mapping[int, int]:
        return self._image_answers

    @property
    def report(self) -> PersonalityReport | None:
        return self._report

    @property
    def report_error(self) -> str | None:
        return self._report_error

    @property
    def feedback(self) -> FeedbackForm:
        return self._feedback

    @property
    def perception_questions(self) -> tuple[QuestionDefinition, ...]:
        return self._perception_questions

    # --- Transitions ---

    def login(self, user: User, role: Role = Role.PARTICIPANT) -> None:
        self.require_stage(Stage.LANDING)
        self._user = user
        self._role = role
        self._stage = Stage.INSTRUCTIONS
        if role is Role.ADMINISTRATOR:
            logger.info("Session %s entered admin mode", self.session_id)

    def start_test(self) -> RoundController:
        self._require_participant()
        self.require_stage(Stage.INSTRUCTIONS)
        self._round = RoundController(
            RoundKind.SCENARIO,
            self._scenario_questions,
            AdmissionGate(offset=0),
            requires_submission=True,
        )
        self._stage = Stage.QUESTIONS
        return self._round

    def advance(self, cursor: AdmissionCursor) -> AdvanceOutcome:
        """Advance the active round; a completed perception round moves to the report."""
        self._require_participant()
        round_controller = self._require_round()
        outcome = round_controller.advance(cursor)
        if outcome is AdvanceOutcome.COMPLETED and self._stage is Stage.IMAGE_PERCEPTION:
            self.complete_image_round(round_controller.answers())
        return outcome

    def complete_question_round(self, receipt: AssessmentReceipt) -> None:
        self.require_stage(Stage.QUESTIONS)
        round_controller = self._require_round()
        self._question_answers = round_controller.complete_submission()
        self._server_user_id = receipt.user_id
        self._assessment_data = dict(receipt.data)
        self._round = RoundController(
            RoundKind.PERCEPTION,
            self._perception_questions,
            AdmissionGate(offset=len(self._scenario_questions)),
            requires_submission=False,
        )
        self._stage = Stage.IMAGE_PERCEPTION

    def fail_question_round(self, message: str) -> None:
        self.require_stage(Stage.QUESTIONS)
        self._require_round().fail_submission(message)

    def complete_image_round(self, answers: Mapping[int, int]) -> None:
        self.require_stage(Stage.IMAGE_PERCEPTION)
        self._image_answers = MappingProxyType(dict(answers))
        self._round = None
        self._stage = Stage.REPORT

    def set_report(self, report: PersonalityReport) -> None:
        self.require_stage(Stage.REPORT)
        self._report = report
        self._report_error = None

    def fail_report(self, message: str) -> None:
        self.require_stage(Stage.REPORT)
        self._report = None
        self._report_error = message

    def perception_insights(self) -> tuple[str, ...]:
        """Report text for each chosen perception option, in question order."""
        insights: list[str] = []
        by_id = {question.id: question for question in self._perception_questions}
        for question_id in sorted(self._image_answers):
            question = by_id.get(question_id)
            if question is None:
                continue
            text = question.insight_for(self._image_answers[question_id])
            if text:
                insights.append(text)
        return tuple(insights)

    def continue_to_feedback(self) -> None:
        self.require_stage(Stage.REPORT)
        self._stage = Stage.FEEDBACK

    def complete_feedback(self) -> None:
        """Feedback accepted remotely: end the session and start over."""
        self.require_stage(Stage.FEEDBACK)
        self._feedback.finish_submit()
        self.reset()

    def logout(self) -> None:
        """Leave admin mode, or abandon the feedback step. Participants cannot restart mid-test."""
        if not self.is_admin and self._stage is not Stage.FEEDBACK:
            raise StageTransitionError(
                f"Cannot log out while the session is in '{self._stage.value}'."
            )
        self.reset()

    def reset(self) -> None:
        logger.info("Session %s reset", self.session_id)
        self._clear()

    # --- Guards ---

    def require_stage(self, stage: Stage) -> None:
        if self._stage is not stage:
            raise StageTransitionError(
                f"Operation requires stage '{stage.value}', session is in '{self._stage.value}'."
            )

    def _require_participant(self) -> None:
        if self.is_admin:
            raise StageTransitionError("Administrator sessions do not take the test.")

    def _require_round(self) -> RoundController:
        if self._round is None or self._stage not in (Stage.QUESTIONS, Stage.IMAGE_PERCEPTION):
            raise StageTransitionError("No question round is in progress.")
        return self._round
