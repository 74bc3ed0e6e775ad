"""Domain models for the psychometric test."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Union

from psychometrix.core.errors import ValidationError


class UserType(str, Enum):
    """Participant categories offered on the login form."""

    STUDENT = "Student"
    FACULTY = "Faculty"
    VISITOR = "Visitor"
    OTHER = "Other"


class Role(Enum):
    """Capability set selected when a session logs in."""

    PARTICIPANT = auto()
    ADMINISTRATOR = auto()


class Stage(str, Enum):
    """Stages of the test in normal traversal order."""

    LANDING = "landing"
    INSTRUCTIONS = "instructions"
    QUESTIONS = "questions"
    IMAGE_PERCEPTION = "imagePerception"
    REPORT = "report"
    FEEDBACK = "feedback"


STAGE_ORDER: tuple[Stage, ...] = tuple(Stage)


class RoundKind(str, Enum):
    """The two ordered question sequences."""

    SCENARIO = "questions"
    PERCEPTION = "imagePerception"


@dataclass(frozen=True, slots=True)
class User:
    """Participant identity captured at login."""

    name: str
    user_type: UserType
    roll_number: str | None = None

    @classmethod
    def create(
        cls,
        name: str | None,
        user_type: UserType | str,
        roll_number: str | None = None,
    ) -> User:
        """Validate raw login form values and build a user."""
        cleaned_name = (name or "").strip()
        if not cleaned_name:
            raise ValidationError("Please enter your name")
        try:
            resolved_type = UserType(user_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown user type: {user_type!r}") from exc
        if resolved_type is not UserType.STUDENT:
            return cls(name=cleaned_name, user_type=resolved_type)
        cleaned_roll = (roll_number or "").strip()
        if not cleaned_roll:
            raise ValidationError("Please enter your roll number")
        return cls(name=cleaned_name, user_type=resolved_type, roll_number=cleaned_roll)


@dataclass(frozen=True, slots=True)
class QuestionDefinition:
    """One question of a round. Ids are 1-based and contiguous per round."""

    id: int
    prompt: str
    options: tuple[str, ...]
    media_url: str | None = None
    heading: str | None = None
    insights: tuple[str, ...] = ()

    @property
    def option_count(self) -> int:
        return len(self.options)

    def insight_for(self, option_index: int) -> str:
        if 0 <= option_index < len(self.insights):
            return self.insights[option_index]
        return ""


@dataclass(frozen=True, slots=True)
class AdmissionCursor:
    """Snapshot of the administrator's gate settings."""

    restriction_enabled: bool = False
    active_question: int = 1


@dataclass(frozen=True, slots=True)
class Locked:
    """Question not yet presented to the participant."""


@dataclass(frozen=True, slots=True)
class Unanswered:
    """Question presented and waiting for a selection."""


@dataclass(frozen=True, slots=True)
class Answered:
    """Question answered; the selection is final."""

    option_index: int


QuestionState = Union[Locked, Unanswered, Answered]

LOCKED = Locked()
UNANSWERED = Unanswered()


@dataclass(slots=True)
class AssessmentReceipt:
    """Result of submitting the scenario round to the assessment backend."""

    user_id: str | None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PersonalityReport:
    """Report shown once both rounds are complete."""

    personality_result: str
    insights: tuple[str, ...] = ()
