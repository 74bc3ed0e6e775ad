"""Business logic shared between the participant API and the admin console."""

from __future__ import annotations

from collections.abc import Callable
import hmac
import logging
from threading import Lock
import time
from typing import Any, BinaryIO

from psychometrix.constants.network_constants import SESSION_IDLE_TIMEOUT_SECONDS
from psychometrix.core.errors import RemoteServiceError, ValidationError
from psychometrix.core.models import (
    AdmissionCursor,
    PersonalityReport,
    Role,
    Stage,
    User,
    UserType,
)
from psychometrix.core.question_bank import QuestionBank, load_default_banks
from psychometrix.core.services.admin_channel import AdminChannel
from psychometrix.core.services.backend_client import BackendClient
from psychometrix.core.services.dashboard_stats import DashboardSnapshot, build_dashboard
from psychometrix.core.services.round_controller import AdvanceOutcome
from psychometrix.core.session_state_machine import SessionStateMachine

logger = logging.getLogger(__name__)


class PsychometricManager:
    """Facade over question banks, sessions, the admin channel and the backend client.

    All state changes happen under one lock. Remote calls are made outside
    the lock; the round and feedback latches keep a session from submitting
    twice while a call is in flight.
    """

    def __init__(
        self,
        backend: BackendClient,
        *,
        admin_passcode: str | None = None,
        scenario_bank: QuestionBank | None = None,
        perception_bank: QuestionBank | None = None,
        idle_timeout_seconds: float = SESSION_IDLE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = Lock()
        if scenario_bank is None or perception_bank is None:
            default_scenarios, default_perception = load_default_banks()
            scenario_bank = scenario_bank or default_scenarios
            perception_bank = perception_bank or default_perception
        self._scenario_bank = scenario_bank
        self._perception_bank = perception_bank
        self._backend = backend
        self._admin_passcode = admin_passcode
        self._admin = AdminChannel(len(scenario_bank) + len(perception_bank))
        self._sessions: dict[str, SessionStateMachine] = {}
        self._last_seen: dict[str, float] = {}
        self._idle_timeout = idle_timeout_seconds
        self._clock = clock

    # --- Sessions ---

    def get_session_count(self) -> int:
        """Number of logged-in sessions that have not gone idle."""
        with self._lock:
            self._evict_idle()
            return len(self._sessions)

    def login(
        self,
        session_id: str | None,
        name: str | None,
        user_type: UserType | str,
        roll_number: str | None = None,
        admin_passcode: str | None = None,
    ) -> str:
        """Validate the login form and bind it to a session.

        A session is only stored once a login succeeds; an unknown or missing
        id gets a fresh session. Returns the id the browser should keep.
        """
        user = User.create(name, user_type, roll_number)
        role = self._authenticate(admin_passcode)
        with self._lock:
            self._evict_idle()
            session = self._sessions.get(session_id or "")
            if session is None:
                session = SessionStateMachine(
                    self._scenario_bank.questions,
                    self._perception_bank.questions,
                )
                self._sessions[session.session_id] = session
            self._last_seen[session.session_id] = self._clock()
            session.login(user, role)
        logger.info("%s logged in as %s", user.name, role.name.lower())
        return session.session_id

    def start_test(self, session_id: str) -> None:
        with self._lock:
            self._get(session_id).start_test()

    def select_option(self, session_id: str, question_id: int, option_index: int) -> bool:
        with self._lock:
            session = self._get(session_id)
            round_controller = session.current_round
            if session.is_admin or round_controller is None:
                return False
            return round_controller.select_option(question_id, option_index)

    def can_advance(self, session_id: str) -> bool:
        with self._lock:
            round_controller = self._get(session_id).current_round
            if round_controller is None:
                return False
            return round_controller.can_advance(self._admin.snapshot())

    def advance(self, session_id: str) -> AdvanceOutcome:
        with self._lock:
            session = self._get(session_id)
            outcome = session.advance(self._admin.snapshot())
            if outcome is not AdvanceOutcome.SUBMISSION_REQUIRED:
                return outcome
            round_controller = session.current_round
            payload = round_controller.submission_payload(session.user)

        try:
            receipt = self._backend.submit_assessment(payload)
        except RemoteServiceError as exc:
            with self._lock:
                if session.current_round is round_controller:
                    session.fail_question_round(exc.message)
            raise

        with self._lock:
            if session.current_round is not round_controller:
                logger.warning("Session %s changed during submission; result dropped", session_id)
                return AdvanceOutcome.IGNORED
            session.complete_question_round(receipt)
        return AdvanceOutcome.COMPLETED

    def load_report(self, session_id: str) -> PersonalityReport | None:
        """Fetch the personality result; None if the session moved on meanwhile."""
        with self._lock:
            session = self._get(session_id)
            session.require_stage(Stage.REPORT)
            user = session.user
            insights = session.perception_insights()

        try:
            result = self._backend.fetch_personality_result(user.name)
        except RemoteServiceError as exc:
            with self._lock:
                if _still_reporting(session, user):
                    session.fail_report(exc.message)
            raise

        report = PersonalityReport(personality_result=result, insights=insights)
        with self._lock:
            if not _still_reporting(session, user):
                logger.warning("Session %s moved on during report fetch; result dropped", session_id)
                return None
            session.set_report(report)
        return report

    def continue_to_feedback(self, session_id: str) -> None:
        with self._lock:
            self._get(session_id).continue_to_feedback()

    def update_feedback(
        self,
        session_id: str,
        ratings: dict[str, int | None] | None = None,
        comment: str | None = None,
    ) -> None:
        with self._lock:
            session = self._get(session_id)
            session.require_stage(Stage.FEEDBACK)
            form = session.feedback
            for key, value in (ratings or {}).items():
                form.set_rating(key, value)
            if comment is not None:
                form.set_comment(comment)

    def submit_feedback(self, session_id: str) -> None:
        with self._lock:
            session = self._get(session_id)
            session.require_stage(Stage.FEEDBACK)
            form = session.feedback
            body = form.begin_submit()

        try:
            self._backend.submit_feedback(body)
        except RemoteServiceError as exc:
            with self._lock:
                form.fail_submit(exc.message)
            raise

        with self._lock:
            if session.feedback is not form:
                logger.warning("Session %s changed during feedback submission; result dropped", session_id)
                return
            session.complete_feedback()
            self._evict(session_id, session)

    def reset_session(self, session_id: str) -> None:
        """Log out: allowed in admin mode or at the feedback step."""
        with self._lock:
            session = self._get(session_id)
            session.logout()
            self._evict(session_id, session)

    def describe_session(self, session_id: str | None) -> dict[str, Any]:
        """Plain-data view of a session for the participant page.

        Unknown or missing ids describe as a fresh landing page.
        """
        with self._lock:
            self._evict_idle()
            cursor = self._admin.snapshot()
            session = self._sessions.get(session_id or "")
            if session is None:
                return {
                    "session_id": None,
                    "stage": Stage.LANDING.value,
                    "is_admin": False,
                    "user": None,
                    "round": None,
                    "report": None,
                    "feedback": None,
                    "cursor": _describe_cursor(cursor),
                }
            self._last_seen[session.session_id] = self._clock()
            return {
                "session_id": session.session_id,
                "stage": session.stage.value,
                "is_admin": session.is_admin,
                "user": _describe_user(session.user),
                "round": _describe_round(session, cursor),
                "report": _describe_report(session),
                "feedback": _describe_feedback(session),
                "cursor": _describe_cursor(cursor),
            }

    # --- Administrator ---

    def is_admin_session(self, session_id: str) -> bool:
        with self._lock:
            return self._get(session_id).is_admin

    def require_admin(self, session_id: str | None) -> None:
        with self._lock:
            session = self._sessions.get(session_id or "")
            if session is None or not session.is_admin:
                raise PermissionError("Administrator login required.")

    def get_admission_cursor(self) -> AdmissionCursor:
        with self._lock:
            return self._admin.snapshot()

    def get_cursor_version(self) -> int:
        with self._lock:
            return self._admin.get_version()

    def get_total_question_count(self) -> int:
        return self._admin.total_questions

    def get_scenario_question_count(self) -> int:
        return len(self._scenario_bank)

    def locate_question(self, effective_index: int) -> tuple[str, int]:
        """Translate a cursor position into (round name, local question id)."""
        scenario_count = len(self._scenario_bank)
        if effective_index <= scenario_count:
            return ("scenario", effective_index)
        return ("image perception", effective_index - scenario_count)

    def set_restriction(self, enabled: bool) -> AdmissionCursor:
        with self._lock:
            return self._admin.set_restriction(enabled)

    def set_active_question(self, effective_index: int) -> AdmissionCursor:
        with self._lock:
            return self._admin.set_active_question(effective_index)

    def activate_next_question(self) -> AdmissionCursor:
        with self._lock:
            return self._admin.activate_next()

    def fetch_dashboard(self) -> DashboardSnapshot:
        collections = self._backend.fetch_admin_collections()
        return build_dashboard(
            collections.get("feedbacks", []),
            collections.get("assessments", []),
            collections.get("users", []),
        )

    # --- Resume analysis proxy ---

    def resume_backend_healthy(self) -> bool:
        return self._backend.resume_health()

    def analyze_resume(self, filename: str, stream: BinaryIO, content_type: str | None) -> Any:
        return self._backend.analyze_resume(filename, stream, content_type)

    # --- Internals ---

    def _authenticate(self, admin_passcode: str | None) -> Role:
        if not admin_passcode:
            return Role.PARTICIPANT
        if self._admin_passcode is None:
            raise ValidationError("Administrator login is not enabled.")
        if not hmac.compare_digest(admin_passcode.encode(), self._admin_passcode.encode()):
            raise ValidationError("Invalid administrator passcode.")
        return Role.ADMINISTRATOR

    def _get(self, session_id: str | None) -> SessionStateMachine:
        self._evict_idle()
        session = self._sessions.get(session_id or "")
        if session is None:
            raise KeyError(f"Unknown session: {session_id}")
        self._last_seen[session.session_id] = self._clock()
        return session

    def _evict(self, session_id: str, session: SessionStateMachine) -> None:
        if self._sessions.get(session_id) is session:
            del self._sessions[session_id]
            self._last_seen.pop(session_id, None)

    def _evict_idle(self) -> None:
        now = self._clock()
        stale = [
            session_id
            for session_id, seen in self._last_seen.items()
            if now - seen > self._idle_timeout
        ]
        for session_id in stale:
            session = self._sessions.pop(session_id)
            del self._last_seen[session_id]
            session.reset()
            logger.info("Session %s evicted after going idle", session_id)


def _still_reporting(session: SessionStateMachine, user: User | None) -> bool:
    return session.stage is Stage.REPORT and session.user is user


def _describe_user(user: User | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {
        "name": user.name,
        "user_type": user.user_type.value,
        "roll_number": user.roll_number,
    }


def _describe_round(session: SessionStateMachine, cursor: AdmissionCursor) -> dict[str, Any] | None:
    round_controller = session.current_round
    if round_controller is None:
        return None
    question = round_controller.get_current_question()
    return {
        "kind": round_controller.kind.value,
        "position": round_controller.current_position,
        "total": round_controller.total,
        "progress": round_controller.progress_percentage(),
        "effective_index": round_controller.gate.effective_index(question.id),
        "admitted": round_controller.is_question_admitted(cursor),
        "can_advance": round_controller.can_advance(cursor),
        "is_last": round_controller.is_last_question(),
        "submitting": round_controller.is_submitting(),
        "error": round_controller.get_submission_error(),
        "selected_option": round_controller.get_selected_option(),
        "question": {
            "id": question.id,
            "heading": question.heading,
            "prompt": question.prompt,
            "media_url": question.media_url,
            "options": list(question.options),
        },
    }


def _describe_report(session: SessionStateMachine) -> dict[str, Any] | None:
    if session.report is None and session.report_error is None:
        return None
    return {
        "personality_result": session.report.personality_result if session.report else None,
        "insights": list(session.report.insights) if session.report else [],
        "error": session.report_error,
    }


def _describe_feedback(session: SessionStateMachine) -> dict[str, Any] | None:
    if session.stage is not Stage.FEEDBACK:
        return None
    form = session.feedback
    return {
        "ratings": form.get_ratings(),
        "comment": form.get_comment(),
        "missing": form.missing_ratings(),
        "can_submit": form.can_submit,
        "submitting": form.is_submitting(),
        "error": form.get_submit_error(),
    }


def _describe_cursor(cursor: AdmissionCursor) -> dict[str, Any]:
    return {
        "restriction_enabled": cursor.restriction_enabled,
        "active_question": cursor.active_question,
    }
