"""Aggregation of remote result collections for the administrator dashboard."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from psychometrix.constants.quiz_constants import FEEDBACK_QUESTIONS, RATING_MAX, RATING_MIN

_RATING_RANGE = RATING_MAX - RATING_MIN + 1


@dataclass(slots=True)
class RatingHistogram:
    """Distribution of 1-5 ratings for one feedback question."""

    question_key: str
    prompt: str
    counts: list[int] = field(default_factory=lambda: [0] * _RATING_RANGE)

    @property
    def total(self) -> int:
        return sum(self.counts)

    def count_for(self, rating: int) -> int:
        return self.counts[rating - RATING_MIN]

    def percentage(self, rating: int) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return (self.count_for(rating) / total) * 100

    def record(self, raw_score: Any) -> bool:
        """Count a rating. Missing or unparseable scores are skipped entirely."""
        rating = _parse_rating(raw_score)
        if rating is None:
            return False
        self.counts[rating - RATING_MIN] += 1
        return True


@dataclass(slots=True)
class DashboardSnapshot:
    """Immutable-by-convention view returned to the console and the API."""

    feedback: dict[str, RatingHistogram]
    user_types: dict[str, int]
    personality_results: dict[str, int]
    comments: list[str]
    feedback_count: int
    assessment_count: int
    user_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "feedback": {
                key: {
                    "prompt": histogram.prompt,
                    "counts": list(histogram.counts),
                    "total": histogram.total,
                    "percentages": [
                        round(histogram.percentage(rating), 1)
                        for rating in range(RATING_MIN, RATING_MAX + 1)
                    ],
                }
                for key, histogram in self.feedback.items()
            },
            "user_types": dict(self.user_types),
            "personality_results": dict(self.personality_results),
            "comments": list(self.comments),
            "totals": {
                "feedbacks": self.feedback_count,
                "assessments": self.assessment_count,
                "users": self.user_count,
            },
        }


def summarize_feedback(records: Iterable[Mapping[str, Any]]) -> dict[str, RatingHistogram]:
    histograms = {
        key: RatingHistogram(question_key=key, prompt=prompt)
        for key, prompt in FEEDBACK_QUESTIONS.items()
    }
    for record in records:
        scores = record.get("feedback_scores") if isinstance(record, Mapping) else None
        if not isinstance(scores, Mapping):
            continue
        for key, raw_score in scores.items():
            histogram = histograms.get(key)
            if histogram is None:
                histogram = histograms[key] = RatingHistogram(question_key=key, prompt=key)
            histogram.record(raw_score)
    return histograms


def count_by(records: Iterable[Mapping[str, Any]], field_name: str) -> dict[str, int]:
    """Group records by a categorical field, in first-seen order."""
    counts: dict[str, int] = {}
    for record in records:
        if not isinstance(record, Mapping):
            continue
        value = record.get(field_name)
        if value is None or value == "":
            continue
        label = str(value)
        counts[label] = counts.get(label, 0) + 1
    return counts


def collect_comments(records: Iterable[Mapping[str, Any]]) -> list[str]:
    comments: list[str] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        comment = record.get("additional_comments")
        if isinstance(comment, str) and comment.strip():
            comments.append(comment.strip())
    return comments


def build_dashboard(
    feedbacks: list[Mapping[str, Any]],
    assessments: list[Mapping[str, Any]],
    users: list[Mapping[str, Any]],
) -> DashboardSnapshot:
    return DashboardSnapshot(
        feedback=summarize_feedback(feedbacks),
        user_types=count_by(users, "user_type"),
        personality_results=count_by(assessments, "personality_result"),
        comments=collect_comments(feedbacks),
        feedback_count=len(feedbacks),
        assessment_count=len(assessments),
        user_count=len(users),
    )


def _parse_rating(raw_score: Any) -> int | None:
    if raw_score is None or isinstance(raw_score, bool):
        return None
    try:
        numeric = float(raw_score)
    except (TypeError, ValueError):
        return None
    if not numeric.is_integer():
        return None
    rating = int(numeric)
    if not RATING_MIN <= rating <= RATING_MAX:
        return None
    return rating
