"""Dashboard aggregation tests.

Tests cover:
    - Histogram percentages exclude missing and unparseable ratings
    - Empty histogram reports 0.0 percent
    - User-type and personality counts, comments
    - to_dict() totals
"""

import pytest

from psychometrix.core.services.dashboard_stats import (
    RatingHistogram,
    build_dashboard,
    count_by,
    summarize_feedback,
)


def test_bad_ratings_excluded_from_numerator_and_denominator():
    records = [
        {"feedback_scores": {"accuracyRating": 5}},
        {"feedback_scores": {"accuracyRating": "4"}},
        {"feedback_scores": {"accuracyRating": None}},
        {"feedback_scores": {"accuracyRating": "great"}},
        {"feedback_scores": {"accuracyRating": 9}},
        {"feedback_scores": {"accuracyRating": 2.5}},
        {"feedback_scores": {"accuracyRating": True}},
    ]
    histogram = summarize_feedback(records)["accuracyRating"]
    assert histogram.total == 2
    assert histogram.percentage(5) == pytest.approx(50.0)
    assert histogram.percentage(4) == pytest.approx(50.0)
    assert histogram.percentage(1) == 0.0


def test_empty_histogram_percentages_are_zero():
    histogram = RatingHistogram(question_key="scenarioRating", prompt="?")
    assert histogram.total == 0
    assert histogram.percentage(3) == 0.0


def test_every_feedback_question_has_a_histogram():
    histograms = summarize_feedback([])
    assert len(histograms) == 6
    assert "recommendRating" in histograms


def test_records_without_scores_skipped():
    histograms = summarize_feedback([{"additional_comments": "hi"}, "junk"])
    assert all(h.total == 0 for h in histograms.values())


def test_count_by_skips_blank_values():
    users = [
        {"user_type": "Student"},
        {"user_type": "Faculty"},
        {"user_type": "Student"},
        {"user_type": ""},
        {},
    ]
    assert count_by(users, "user_type") == {"Student": 2, "Faculty": 1}


def test_build_dashboard_to_dict():
    snapshot = build_dashboard(
        feedbacks=[
            {"feedback_scores": {"personalityRating": 4}, "additional_comments": " Fun! "},
            {"feedback_scores": {"personalityRating": 2}, "additional_comments": ""},
        ],
        assessments=[{"personality_result": "Leader"}],
        users=[{"user_type": "Visitor"}],
    )
    data = snapshot.to_dict()
    assert data["totals"] == {"feedbacks": 2, "assessments": 1, "users": 1}
    assert data["comments"] == ["Fun!"]
    assert data["personality_results"] == {"Leader": 1}
    assert data["feedback"]["personalityRating"]["counts"] == [0, 1, 0, 1, 0]
    assert data["feedback"]["personalityRating"]["percentages"][1] == 50.0
