"""FastAPI server exposing the participant flow, the gate and the resume proxy."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from threading import Thread
from typing import Any

from fastapi import Depends, FastAPI, File, HTTPException, Request, Response, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
import uvicorn

from psychometrix.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SESSION_IDLE_TIMEOUT_SECONDS,
)
from psychometrix.core.errors import RemoteServiceError, StageTransitionError, ValidationError
from psychometrix.core.markdown_renderer import renderer
from psychometrix.core.models import UserType
from psychometrix.core.psychometric_manager import PsychometricManager
from psychometrix.server.participant_page import PARTICIPANT_PAGE_HTML

logger = logging.getLogger(__name__)

_SESSION_COOKIE = "psychometrix_session"


class LoginPayload(BaseModel):
    """Payload schema for the login form."""

    name: str = ""
    user_type: UserType = UserType.STUDENT
    roll_number: str | None = None
    admin_passcode: str | None = None


class SelectPayload(BaseModel):
    """Payload schema for an option selection."""

    question_id: int
    option_index: int


class FeedbackPayload(BaseModel):
    """Partial update of the feedback draft."""

    ratings: dict[str, int | None] = Field(default_factory=dict)
    comment: str | None = None


class RestrictionPayload(BaseModel):
    enabled: bool


class ActiveQuestionPayload(BaseModel):
    active_question: int


@contextmanager
def _domain_errors() -> Iterator[None]:
    """Translate core exceptions into HTTP errors at the route boundary."""
    try:
        yield
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except StageTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except RemoteServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc


def _get_manager_dependency(manager: PsychometricManager):
    def dependency() -> PsychometricManager:
        return manager

    return dependency


def _render_session(manager: PsychometricManager, session_id: str | None) -> dict[str, object]:
    view = manager.describe_session(session_id)
    round_view = view.get("round")
    if round_view is not None:
        question = round_view["question"]
        question["prompt_html"] = renderer.render_fragment(question["prompt"])
        question["options_html"] = [renderer.render_inline(option) for option in question["options"]]
    report_view = view.get("report")
    if report_view is not None:
        report_view["insights_html"] = [
            renderer.render_fragment(insight) for insight in report_view["insights"]
        ]
    return view


def create_api_app(manager: PsychometricManager) -> FastAPI:
    """Create a FastAPI application wired to the provided manager."""
    app = FastAPI(title="PsychoMetrix API", version="0.1.0")
    manager_dep = _get_manager_dependency(manager)

    def session_dep(request: Request) -> str | None:
        return request.cookies.get(_SESSION_COOKIE)

    def admin_dep(
        request: Request,
        manager: PsychometricManager = Depends(manager_dep),
    ) -> None:
        with _domain_errors():
            manager.require_admin(request.cookies.get(_SESSION_COOKIE))

    @app.get("/", response_class=HTMLResponse)
    def serve_participant_page() -> str:
        return PARTICIPANT_PAGE_HTML

    @app.get("/session")
    def get_session(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            return _render_session(manager, session_id)

    @app.get("/admission")
    def get_admission(manager: PsychometricManager = Depends(manager_dep)) -> dict[str, object]:
        cursor = manager.get_admission_cursor()
        return {
            "restriction_enabled": cursor.restriction_enabled,
            "active_question": cursor.active_question,
            "total_questions": manager.get_total_question_count(),
            "version": manager.get_cursor_version(),
        }

    @app.post("/session/login")
    def login(
        payload: LoginPayload,
        response: Response,
        cookie_value: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            session_id = manager.login(
                cookie_value,
                payload.name,
                payload.user_type,
                roll_number=payload.roll_number,
                admin_passcode=payload.admin_passcode,
            )
            if session_id != cookie_value:
                response.set_cookie(
                    key=_SESSION_COOKIE,
                    value=session_id,
                    max_age=SESSION_IDLE_TIMEOUT_SECONDS,
                    samesite="lax",
                    httponly=True,
                )
            return _render_session(manager, session_id)

    @app.post("/session/start")
    def start_test(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.start_test(session_id)
            return _render_session(manager, session_id)

    @app.post("/session/select")
    def select_option(
        payload: SelectPayload,
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            accepted = manager.select_option(session_id, payload.question_id, payload.option_index)
            view = _render_session(manager, session_id)
        view["accepted"] = accepted
        return view

    @app.post("/session/advance")
    def advance(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            outcome = manager.advance(session_id)
            view = _render_session(manager, session_id)
        view["outcome"] = outcome.name.lower()
        return view

    @app.post("/session/report")
    def load_report(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.load_report(session_id)
            return _render_session(manager, session_id)

    @app.post("/session/continue")
    def continue_to_feedback(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.continue_to_feedback(session_id)
            return _render_session(manager, session_id)

    @app.put("/session/feedback")
    def update_feedback(
        payload: FeedbackPayload,
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.update_feedback(session_id, payload.ratings, payload.comment)
            return _render_session(manager, session_id)

    @app.post("/session/feedback/submit")
    def submit_feedback(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.submit_feedback(session_id)
            return _render_session(manager, session_id)

    @app.post("/session/logout")
    def logout(
        session_id: str | None = Depends(session_dep),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            manager.reset_session(session_id)
            return _render_session(manager, session_id)

    @app.post("/admin/restriction", dependencies=[Depends(admin_dep)])
    def set_restriction(
        payload: RestrictionPayload,
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        cursor = manager.set_restriction(payload.enabled)
        return {
            "restriction_enabled": cursor.restriction_enabled,
            "active_question": cursor.active_question,
        }

    @app.post("/admin/active-question", dependencies=[Depends(admin_dep)])
    def set_active_question(
        payload: ActiveQuestionPayload,
        manager: PsychometricManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _domain_errors():
            cursor = manager.set_active_question(payload.active_question)
        return {
            "restriction_enabled": cursor.restriction_enabled,
            "active_question": cursor.active_question,
        }

    @app.get("/admin/dashboard", dependencies=[Depends(admin_dep)])
    def get_dashboard(manager: PsychometricManager = Depends(manager_dep)) -> dict[str, object]:
        with _domain_errors():
            return manager.fetch_dashboard().to_dict()

    @app.get("/resume/health")
    def resume_health(manager: PsychometricManager = Depends(manager_dep)) -> dict[str, object]:
        return {"healthy": manager.resume_backend_healthy()}

    @app.post("/resume/analyze")
    def analyze_resume(
        file: UploadFile = File(...),
        manager: PsychometricManager = Depends(manager_dep),
    ) -> Any:
        with _domain_errors():
            return manager.analyze_resume(file.filename or "resume", file.file, file.content_type)

    return app


def start_api_server(
    manager: PsychometricManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="PsychometrixApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on %s:%d", host, port)
    return thread


def run_api_server(
    manager: PsychometricManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve in the foreground (headless mode)."""
    uvicorn.run(create_api_app(manager), host=host, port=port, log_level="info")
