"""Admission control: which question a participant may move past."""

from __future__ import annotations

from psychometrix.core.models import AdmissionCursor


def can_advance(effective_question_index: int, cursor: AdmissionCursor) -> bool:
    """Pure gate check against a cursor snapshot."""
    if not cursor.restriction_enabled:
        return True
    return effective_question_index <= cursor.active_question


class AdmissionGate:
    """Binds a round's offset on the shared question number line.

    Scenario questions sit at 1..N, perception questions at N+1..N+M, so the
    perception round uses an offset of N. The cursor is passed in on every
    call because the administrator may change it at any time.
    """

    def __init__(self, offset: int = 0) -> None:
        if offset < 0:
            raise ValueError("Gate offset must not be negative.")
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    def effective_index(self, question_id: int) -> int:
        return question_id + self._offset

    def can_advance(self, question_id: int, cursor: AdmissionCursor) -> bool:
        return can_advance(self.effective_index(question_id), cursor)
