"""Administrator-owned admission cursor."""

from __future__ import annotations

import logging

from psychometrix.core.errors import ValidationError
from psychometrix.core.models import AdmissionCursor

logger = logging.getLogger(__name__)


class AdminChannel:
    """Owns the restriction flag and active question shared by all sessions."""

    def __init__(self, total_questions: int) -> None:
        if total_questions < 1:
            raise ValueError("There must be at least one question to gate.")
        self._total_questions = total_questions
        self._cursor = AdmissionCursor()
        self._version = 0

    @property
    def total_questions(self) -> int:
        return self._total_questions

    def snapshot(self) -> AdmissionCursor:
        return self._cursor

    def get_version(self) -> int:
        return self._version

    def set_restriction(self, enabled: bool) -> AdmissionCursor:
        self._replace(AdmissionCursor(bool(enabled), self._cursor.active_question))
        logger.info("Progression restriction %s", "enabled" if enabled else "disabled")
        return self._cursor

    def set_active_question(self, effective_index: int) -> AdmissionCursor:
        if not 1 <= effective_index <= self._total_questions:
            raise ValidationError(
                f"Active question must be between 1 and {self._total_questions}."
            )
        self._replace(AdmissionCursor(self._cursor.restriction_enabled, effective_index))
        logger.info("Active question set to %d", effective_index)
        return self._cursor

    def activate_next(self) -> AdmissionCursor:
        next_index = min(self._cursor.active_question + 1, self._total_questions)
        return self.set_active_question(next_index)

    def _replace(self, cursor: AdmissionCursor) -> None:
        self._cursor = cursor
        self._version += 1
