"""FeedbackForm tests: six ratings, optional comment, submit latch.

Tests cover:
    - Unknown keys and out-of-range ratings rejected
    - Submission refused until all six ratings are set
    - Payload shape and blank comment handling
    - Failed submission keeps the draft
"""

import pytest

from psychometrix.constants.quiz_constants import FEEDBACK_QUESTIONS
from psychometrix.core.errors import StageTransitionError, ValidationError
from psychometrix.core.services.feedback_form import FeedbackForm


def _make_filled_form(value=4):
    form = FeedbackForm()
    for key in FEEDBACK_QUESTIONS:
        form.set_rating(key, value)
    return form


def test_six_ratings_start_missing():
    form = FeedbackForm()
    assert len(form.missing_ratings()) == 6
    assert not form.can_submit


def test_unknown_key_rejected():
    with pytest.raises(ValidationError):
        FeedbackForm().set_rating("colourRating", 3)


@pytest.mark.parametrize("value", [0, 6])
def test_out_of_range_rating_rejected(value):
    with pytest.raises(ValidationError):
        FeedbackForm().set_rating("scenarioRating", value)


def test_incomplete_form_cannot_submit():
    form = FeedbackForm()
    form.set_rating("personalityRating", 5)
    with pytest.raises(ValidationError, match="complete all ratings"):
        form.begin_submit()
    assert not form.is_submitting()


def test_payload_shape():
    form = _make_filled_form(3)
    form.set_comment("  Loved the film questions  ")
    body = form.begin_submit()
    assert body["feedbackScores"] == {key: 3 for key in FEEDBACK_QUESTIONS}
    assert body["additionalComments"] == "Loved the film questions"


def test_blank_comment_sent_as_none():
    form = _make_filled_form()
    form.set_comment("   ")
    assert form.payload()["additionalComments"] is None


def test_double_submit_raises():
    form = _make_filled_form()
    form.begin_submit()
    with pytest.raises(StageTransitionError):
        form.begin_submit()


def test_failed_submit_keeps_draft():
    form = _make_filled_form(2)
    form.set_comment("keep me")
    form.begin_submit()
    form.fail_submit("Failed to submit feedback. Please try again.")
    assert form.get_submit_error() == "Failed to submit feedback. Please try again."
    assert form.get_comment() == "keep me"
    assert set(form.get_ratings().values()) == {2}
    assert form.can_submit
