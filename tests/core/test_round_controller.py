"""RoundController tests: position, selection, gating and submission latch.

Tests cover:
    - Selections only count for the current question, once
    - Out-of-range option indices rejected
    - Advance blocked without an answer or past the active question
    - Scenario round requests submission; payload letter codes
    - Submission latch ignores double advance; failure allows retry
    - Perception round completes locally
"""

import pytest

from psychometrix.core.errors import StageTransitionError, ValidationError
from psychometrix.core.models import AdmissionCursor, RoundKind, User, UserType
from psychometrix.core.services.admission_gate import AdmissionGate
from psychometrix.core.services.round_controller import AdvanceOutcome, RoundController

OPEN = AdmissionCursor()


def _make_scenario_round(questions):
    return RoundController(
        RoundKind.SCENARIO, questions, AdmissionGate(), requires_submission=True
    )


def _make_perception_round(questions, offset=6):
    return RoundController(
        RoundKind.PERCEPTION, questions, AdmissionGate(offset=offset), requires_submission=False
    )


def _answer_all(round_controller, options, cursor=OPEN):
    for question_id, option in enumerate(options, start=1):
        assert round_controller.select_option(question_id, option)
        round_controller.advance(cursor)


# -- Selection -----------------------------------------------------------------

def test_select_only_current_question(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    assert not rc.select_option(2, 1)
    assert rc.select_option(1, 1)
    assert rc.get_selected_option() == 1


def test_selection_is_one_shot(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    rc.select_option(1, 2)
    assert not rc.select_option(1, 0)
    assert rc.get_selected_option() == 2


def test_reselecting_answered_question_ignores_bad_index(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    assert rc.select_option(1, 0)
    assert rc.select_option(1, 9) is False
    assert rc.get_selected_option() == 0


def test_out_of_range_option_rejected(perception_questions):
    rc = _make_perception_round(perception_questions)
    with pytest.raises(ValidationError):
        rc.select_option(1, 2)


# -- Advancing -----------------------------------------------------------------

def test_advance_blocked_without_answer(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    assert rc.advance(OPEN) is AdvanceOutcome.BLOCKED
    assert rc.current_position == 1


def test_advance_moves_and_presents_next(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    rc.select_option(1, 0)
    assert rc.advance(OPEN) is AdvanceOutcome.MOVED
    assert rc.current_position == 2
    assert rc.get_selected_option() is None
    assert rc.select_option(2, 3)


def test_restricted_cursor_blocks_then_admits(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    restricted = AdmissionCursor(restriction_enabled=True, active_question=3)
    _answer_all(rc, [0, 1, 2], restricted)
    assert rc.current_position == 4
    rc.select_option(4, 1)
    assert not rc.can_advance(restricted)
    assert rc.advance(restricted) is AdvanceOutcome.BLOCKED

    raised = AdmissionCursor(restriction_enabled=True, active_question=4)
    assert rc.can_advance(raised)
    assert rc.advance(raised) is AdvanceOutcome.MOVED


def test_progress_percentage(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    assert rc.progress_percentage() == pytest.approx(100 / 6)


# -- Submission ----------------------------------------------------------------

def test_last_scenario_question_requests_submission(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    _answer_all(rc, [0, 1, 2, 3, 0])
    rc.select_option(6, 1)
    assert rc.is_last_question()
    assert rc.advance(OPEN) is AdvanceOutcome.SUBMISSION_REQUIRED
    assert rc.is_submitting()


def test_submission_payload_letter_codes(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    _answer_all(rc, [0, 1, 2, 3, 0, 1])
    user = User.create("Alice", UserType.STUDENT, "R-17")
    payload = rc.submission_payload(user)
    assert payload == {
        "user": {"name": "Alice", "userType": "Student", "rollNumber": "R-17"},
        "questionAnswers": ["A", "B", "C", "D", "A", "B"],
        "imageAnswers": ["1", "2", "3"],
    }


def test_missing_roll_number_sent_as_na(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    user = User.create("Bob", UserType.VISITOR)
    assert rc.submission_payload(user)["user"]["rollNumber"] == "N/A"


def test_double_advance_during_submission_is_ignored(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    _answer_all(rc, [0, 0, 0, 0, 0, 0])
    assert rc.is_submitting()
    assert rc.advance(OPEN) is AdvanceOutcome.IGNORED
    assert not rc.select_option(6, 2)


def test_failed_submission_allows_retry(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    _answer_all(rc, [0, 1, 0, 1, 0, 1])
    rc.fail_submission("Failed to submit assessment")
    assert not rc.is_submitting()
    assert rc.get_submission_error() == "Failed to submit assessment"
    assert rc.current_position == 6
    assert rc.advance(OPEN) is AdvanceOutcome.SUBMISSION_REQUIRED
    assert rc.get_submission_error() is None


def test_complete_submission_freezes_answers(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    _answer_all(rc, [3, 2, 1, 0, 3, 2])
    answers = rc.complete_submission()
    assert dict(answers) == {1: 3, 2: 2, 3: 1, 4: 0, 5: 3, 6: 2}
    assert rc.is_complete()
    assert rc.advance(OPEN) is AdvanceOutcome.IGNORED


def test_complete_submission_requires_latch(scenario_questions):
    rc = _make_scenario_round(scenario_questions)
    with pytest.raises(StageTransitionError):
        rc.complete_submission()


# -- Perception round ----------------------------------------------------------

def test_perception_round_completes_locally(perception_questions):
    rc = _make_perception_round(perception_questions)
    rc.select_option(1, 0)
    rc.advance(OPEN)
    rc.select_option(2, 1)
    rc.advance(OPEN)
    rc.select_option(3, 2)
    assert rc.advance(OPEN) is AdvanceOutcome.COMPLETED
    assert dict(rc.answers()) == {1: 0, 2: 1, 3: 2}


def test_perception_round_gated_at_offset(perception_questions):
    rc = _make_perception_round(perception_questions, offset=6)
    rc.select_option(1, 0)
    assert not rc.can_advance(AdmissionCursor(True, 6))
    assert rc.can_advance(AdmissionCursor(True, 7))


def test_answers_before_completion_raises(perception_questions):
    rc = _make_perception_round(perception_questions)
    with pytest.raises(StageTransitionError):
        rc.answers()
