"""HTTP client for the remote assessment, report, feedback and resume services.

Success is any 2xx status. Every other status and every transport failure is
reported as RemoteServiceError carrying a message fit for the participant.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO
from urllib.parse import quote

import requests

from psychometrix.config import Settings
from psychometrix.core.errors import RemoteServiceError
from psychometrix.core.models import AssessmentReceipt

logger = logging.getLogger(__name__)

_ADMIN_COLLECTIONS = ("feedbacks", "assessments", "users")


class BackendClient:
    """Thin wrapper around a requests.Session for the remote services."""

    def __init__(
        self,
        assessment_url: str,
        report_url: str,
        resume_url: str,
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._assessment_url = assessment_url.rstrip("/")
        self._report_url = report_url.rstrip("/")
        self._resume_url = resume_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> BackendClient:
        return cls(
            assessment_url=settings.assessment_backend_url,
            report_url=settings.report_backend_url,
            resume_url=settings.resume_backend_url,
            timeout_seconds=settings.request_timeout_seconds,
        )

    # --- Assessment flow ---

    def submit_assessment(self, payload: dict[str, Any]) -> AssessmentReceipt:
        data = self._request_json(
            "POST",
            f"{self._assessment_url}/submit-assessment",
            "Failed to submit assessment",
            json=payload,
        )
        if not isinstance(data, dict):
            data = {}
        user_id = data.get("user_id")
        return AssessmentReceipt(user_id=None if user_id is None else str(user_id), data=data)

    def fetch_personality_result(self, user_name: str) -> str:
        data = self._request_json(
            "GET",
            f"{self._report_url}/get-assessment/{quote(user_name, safe='')}",
            "Failed to fetch personality assessment",
        )
        result = data.get("personality_result") if isinstance(data, dict) else None
        if not isinstance(result, str) or not result.strip():
            raise RemoteServiceError("No personality result found")
        return result.strip()

    def submit_feedback(self, payload: dict[str, Any]) -> None:
        self._request_json(
            "POST",
            f"{self._assessment_url}/submit-feedback",
            "Failed to submit feedback. Please try again.",
            json=payload,
        )

    def fetch_admin_collections(self) -> dict[str, list[Any]]:
        """Return feedbacks, assessments and users; non-array bodies become empty lists."""
        collections: dict[str, list[Any]] = {}
        for name in _ADMIN_COLLECTIONS:
            data = self._request_json(
                "GET",
                f"{self._assessment_url}/api/admin/{name}",
                f"Failed to load {name}",
            )
            if not isinstance(data, list):
                logger.warning("Admin collection %s was not an array; treating as empty", name)
                data = []
            collections[name] = data
        return collections

    # --- Resume analysis proxy ---

    def resume_health(self) -> bool:
        try:
            response = self._session.get(f"{self._resume_url}/health", timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Resume health check failed: %s", exc)
            return False
        return response.status_code == 200

    def analyze_resume(self, filename: str, stream: BinaryIO, content_type: str | None) -> Any:
        files = {"file": (filename, stream, content_type or "application/octet-stream")}
        return self._request_json(
            "POST",
            f"{self._resume_url}/analyze",
            "Failed to analyze the resume.",
            files=files,
        )

    def close(self) -> None:
        self._session.close()

    # --- Internals ---

    def _request_json(self, method: str, url: str, default_message: str, **kwargs: Any) -> Any:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise RemoteServiceError(default_message) from exc

        if not 200 <= response.status_code < 300:
            message = _error_message(response) or default_message
            logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
            raise RemoteServiceError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, url)
            return None


def _error_message(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("detail", "message"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
