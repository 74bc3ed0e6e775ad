"""SessionStateMachine tests: stage sequencing for one participant.

Tests cover:
    - landing -> instructions -> questions -> imagePerception -> report -> feedback
    - Operations outside their stage raise StageTransitionError
    - Administrator sessions never start the test
    - Perception insights follow the chosen options
    - reset() returns to landing with nothing carried over
    - logout() only from admin mode or the feedback step
"""

import pytest

from psychometrix.core.errors import StageTransitionError
from psychometrix.core.models import (
    AdmissionCursor,
    AssessmentReceipt,
    PersonalityReport,
    Role,
    Stage,
    User,
    UserType,
)
from psychometrix.core.services.round_controller import AdvanceOutcome
from psychometrix.core.session_state_machine import SessionStateMachine

OPEN = AdmissionCursor()


def _make_session(scenario_questions, perception_questions):
    return SessionStateMachine(scenario_questions, perception_questions, session_id="s-1")


def _user():
    return User.create("Alice", UserType.STUDENT, "R-1")


def _finish_scenarios(session, options=(0, 1, 2, 3, 0, 1)):
    for question_id, option in enumerate(options, start=1):
        session.current_round.select_option(question_id, option)
        outcome = session.advance(OPEN)
    assert outcome is AdvanceOutcome.SUBMISSION_REQUIRED
    session.complete_question_round(AssessmentReceipt(user_id="u-9", data={"user_id": "u-9"}))


def _finish_perception(session, options=(1, 0, 2)):
    for question_id, option in enumerate(options, start=1):
        session.current_round.select_option(question_id, option)
        outcome = session.advance(OPEN)
    assert outcome is AdvanceOutcome.COMPLETED


# -- Happy path ----------------------------------------------------------------

def test_full_stage_sequence(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    assert session.stage is Stage.LANDING

    session.login(_user())
    assert session.stage is Stage.INSTRUCTIONS

    session.start_test()
    assert session.stage is Stage.QUESTIONS

    _finish_scenarios(session)
    assert session.stage is Stage.IMAGE_PERCEPTION
    assert session.server_user_id == "u-9"
    assert dict(session.question_answers) == {1: 0, 2: 1, 3: 2, 4: 3, 5: 0, 6: 1}
    assert session.current_round.gate.offset == len(scenario_questions)

    _finish_perception(session)
    assert session.stage is Stage.REPORT
    assert session.current_round is None
    assert dict(session.image_answers) == {1: 1, 2: 0, 3: 2}

    session.set_report(PersonalityReport("Leader", session.perception_insights()))
    session.continue_to_feedback()
    assert session.stage is Stage.FEEDBACK


def test_perception_insights_follow_choices(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    session.start_test()
    _finish_scenarios(session)
    _finish_perception(session, options=(1, 0, 2))
    assert session.perception_insights() == ("Insight 1B", "Insight 2A", "Insight 3C")


def test_failed_submission_stays_in_questions(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    session.start_test()
    for question_id in range(1, 7):
        session.current_round.select_option(question_id, 0)
        session.advance(OPEN)
    session.fail_question_round("Failed to submit assessment")
    assert session.stage is Stage.QUESTIONS
    assert session.current_round.get_submission_error() == "Failed to submit assessment"


# -- Guards --------------------------------------------------------------------

def test_start_before_login_raises(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    with pytest.raises(StageTransitionError):
        session.start_test()


def test_login_twice_raises(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    with pytest.raises(StageTransitionError):
        session.login(_user())


def test_admin_cannot_start_test(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user(), Role.ADMINISTRATOR)
    assert session.is_admin
    with pytest.raises(StageTransitionError):
        session.start_test()


def test_report_requires_report_stage(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    with pytest.raises(StageTransitionError):
        session.set_report(PersonalityReport("Leader"))
    with pytest.raises(StageTransitionError):
        session.continue_to_feedback()


def test_advance_without_round_raises(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    with pytest.raises(StageTransitionError):
        session.advance(OPEN)


# -- Reset ---------------------------------------------------------------------

def test_reset_clears_everything(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user(), Role.ADMINISTRATOR)
    session.reset()
    assert session.stage is Stage.LANDING
    assert session.user is None
    assert not session.is_admin
    assert session.session_id == "s-1"


def test_complete_feedback_resets_session(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    session.start_test()
    _finish_scenarios(session)
    _finish_perception(session)
    session.continue_to_feedback()
    session.complete_feedback()
    assert session.stage is Stage.LANDING
    assert dict(session.question_answers) == {}


# -- Logout --------------------------------------------------------------------

def test_participant_cannot_log_out_mid_test(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    session.start_test()
    session.current_round.select_option(1, 2)
    with pytest.raises(StageTransitionError):
        session.logout()
    assert session.stage is Stage.QUESTIONS
    assert session.current_round.get_selected_option() == 2


def test_participant_cannot_log_out_from_instructions(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    with pytest.raises(StageTransitionError):
        session.logout()
    assert session.user is not None


def test_admin_logout_returns_to_landing(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user(), Role.ADMINISTRATOR)
    session.logout()
    assert session.stage is Stage.LANDING
    assert not session.is_admin


def test_logout_allowed_at_feedback(scenario_questions, perception_questions):
    session = _make_session(scenario_questions, perception_questions)
    session.login(_user())
    session.start_test()
    _finish_scenarios(session)
    _finish_perception(session)
    session.continue_to_feedback()
    session.logout()
    assert session.stage is Stage.LANDING
    assert session.user is None
