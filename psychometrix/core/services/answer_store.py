"""Per-round storage of question states and the selected options."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from psychometrix.core.errors import StageTransitionError
from psychometrix.core.models import (
    LOCKED,
    UNANSWERED,
    Answered,
    Locked,
    QuestionState,
    Unanswered,
)


class AnswerStore:
    """Tracks Locked -> Unanswered -> Answered for every question of a round.

    A selection is only accepted while a question is Unanswered, so answers
    are one-shot and never exist for a question that was not presented.
    """

    def __init__(self, question_ids: Iterable[int]) -> None:
        self._states: dict[int, QuestionState] = {qid: LOCKED for qid in question_ids}
        self._frozen: MappingProxyType[int, int] | None = None

    def present(self, question_id: int) -> None:
        """Unlock a question for answering. Presenting twice is harmless."""
        if isinstance(self._state(question_id), Locked):
            self._states[question_id] = UNANSWERED

    def record(self, question_id: int, option_index: int) -> bool:
        """Record a selection. Returns False when the question cannot take one."""
        if self._frozen is not None:
            return False
        if not isinstance(self._state(question_id), Unanswered):
            return False
        self._states[question_id] = Answered(option_index)
        return True

    def state_of(self, question_id: int) -> QuestionState:
        return self._state(question_id)

    def selected_option(self, question_id: int) -> int | None:
        state = self._state(question_id)
        if isinstance(state, Answered):
            return state.option_index
        return None

    def has_answer(self, question_id: int) -> bool:
        return self.selected_option(question_id) is not None

    def is_complete(self) -> bool:
        return all(isinstance(state, Answered) for state in self._states.values())

    def is_frozen(self) -> bool:
        return self._frozen is not None

    def answers(self) -> dict[int, int]:
        """Snapshot of the answered questions."""
        return {
            qid: state.option_index
            for qid, state in self._states.items()
            if isinstance(state, Answered)
        }

    def freeze(self) -> Mapping[int, int]:
        """Close the round and return its read-only answer map."""
        if self._frozen is not None:
            return self._frozen
        if not self.is_complete():
            missing = [qid for qid, state in self._states.items() if not isinstance(state, Answered)]
            raise StageTransitionError(f"Round has unanswered questions: {missing}")
        self._frozen = MappingProxyType(self.answers())
        return self._frozen

    def _state(self, question_id: int) -> QuestionState:
        try:
            return self._states[question_id]
        except KeyError:
            raise IndexError(f"Question id {question_id} is not part of this round") from None
