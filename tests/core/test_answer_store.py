"""AnswerStore tests: per-question Locked/Unanswered/Answered states.

Tests cover:
    - Questions start Locked and cannot be answered before being presented
    - Answers are one-shot
    - freeze() requires every question answered and returns a read-only map
    - Unknown question ids raise IndexError
"""

import pytest

from psychometrix.core.errors import StageTransitionError
from psychometrix.core.models import LOCKED, UNANSWERED, Answered
from psychometrix.core.services.answer_store import AnswerStore


def _make_store(count=3):
    return AnswerStore(range(1, count + 1))


def test_questions_start_locked():
    store = _make_store()
    assert store.state_of(1) == LOCKED
    assert not store.record(1, 0)
    assert store.selected_option(1) is None


def test_present_then_record():
    store = _make_store()
    store.present(1)
    assert store.state_of(1) == UNANSWERED
    assert store.record(1, 2)
    assert store.state_of(1) == Answered(2)
    assert store.has_answer(1)


def test_second_selection_is_ignored():
    store = _make_store()
    store.present(1)
    store.record(1, 2)
    assert not store.record(1, 0)
    assert store.selected_option(1) == 2


def test_presenting_answered_question_keeps_answer():
    store = _make_store()
    store.present(1)
    store.record(1, 3)
    store.present(1)
    assert store.selected_option(1) == 3


def test_freeze_rejects_incomplete_round():
    store = _make_store(2)
    store.present(1)
    store.record(1, 0)
    with pytest.raises(StageTransitionError):
        store.freeze()


def test_freeze_returns_read_only_answers():
    store = _make_store(2)
    for qid, option in ((1, 1), (2, 0)):
        store.present(qid)
        store.record(qid, option)
    frozen = store.freeze()
    assert dict(frozen) == {1: 1, 2: 0}
    with pytest.raises(TypeError):
        frozen[1] = 3
    assert store.is_frozen()
    assert store.freeze() is frozen


def test_unknown_question_id_raises():
    with pytest.raises(IndexError):
        _make_store().state_of(9)
