"""Root conftest: shared fixtures for core and server tests."""

import os

import pytest

from psychometrix.core.errors import RemoteServiceError
from psychometrix.core.models import AssessmentReceipt, QuestionDefinition
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.core.question_bank import QuestionBank

# Keep tests away from real backends and any local .env
os.environ.setdefault("PSYCHOMETRIX_ASSESSMENT_BACKEND_URL", "http://assessment.test")
os.environ.setdefault("PSYCHOMETRIX_REPORT_BACKEND_URL", "http://report.test")
os.environ.setdefault("PSYCHOMETRIX_RESUME_BACKEND_URL", "http://resume.test")

ADMIN_PASSCODE = "open-sesame"
IDLE_TIMEOUT = 600


def _scenario(question_id):
    return QuestionDefinition(
        id=question_id,
        prompt=f"Scenario {question_id}?",
        options=("first", "second", "third", "fourth"),
        heading=f"Film {question_id}",
    )


def _perception(question_id, option_count=2):
    letters = "ABCD"[:option_count]
    return QuestionDefinition(
        id=question_id,
        prompt="What do you notice first in this image?",
        options=tuple(f"Shape {letter}" for letter in letters),
        media_url=f"https://img.test/{question_id}.webp",
        insights=tuple(f"Insight {question_id}{letter}" for letter in letters),
    )


class FakeBackend:
    """In-memory stand-in for BackendClient with scriptable failures."""

    def __init__(self):
        self.assessments = []
        self.feedbacks = []
        self.personality_result = "Adventurous Explorer"
        self.admin_collections = {"feedbacks": [], "assessments": [], "users": []}
        self.fail_assessment = None
        self.fail_report = None
        self.fail_feedback = None
        self.healthy = True
        self.resumes = []
        # Called at the start of the matching call, while it is in flight
        self.on_submit_assessment = None
        self.on_fetch_report = None
        self.on_submit_feedback = None

    def submit_assessment(self, payload):
        if self.on_submit_assessment:
            self.on_submit_assessment()
        if self.fail_assessment:
            raise RemoteServiceError(self.fail_assessment, status_code=500)
        self.assessments.append(payload)
        return AssessmentReceipt(user_id="user-1", data={"user_id": "user-1"})

    def fetch_personality_result(self, user_name):
        if self.on_fetch_report:
            self.on_fetch_report()
        if self.fail_report:
            raise RemoteServiceError(self.fail_report, status_code=404)
        return self.personality_result

    def submit_feedback(self, payload):
        if self.on_submit_feedback:
            self.on_submit_feedback()
        if self.fail_feedback:
            raise RemoteServiceError(self.fail_feedback, status_code=500)
        self.feedbacks.append(payload)

    def fetch_admin_collections(self):
        return self.admin_collections

    def resume_health(self):
        return self.healthy

    def analyze_resume(self, filename, stream, content_type):
        self.resumes.append((filename, stream.read(), content_type))
        return {"score": 82, "filename": filename}


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def scenario_questions():
    return tuple(_scenario(i) for i in range(1, 7))


@pytest.fixture
def perception_questions():
    return (_perception(1), _perception(2), _perception(3, option_count=3))


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(fake_backend, scenario_questions, perception_questions, clock):
    return PsychometricManager(
        fake_backend,
        clock=clock,
        idle_timeout_seconds=IDLE_TIMEOUT,
        admin_passcode=ADMIN_PASSCODE,
        scenario_bank=QuestionBank(source_path=None, questions=scenario_questions),
        perception_bank=QuestionBank(source_path=None, questions=perception_questions),
    )


@pytest.fixture
def admin_passcode():
    return ADMIN_PASSCODE


@pytest.fixture
def idle_timeout():
    return IDLE_TIMEOUT
