"""Settings tests: PSYCHOMETRIX_* environment handling.

Tests cover:
    - Trailing slashes stripped from backend URLs
    - Blank admin passcode disables administrator login
"""

from psychometrix.config import Settings


def test_backend_urls_lose_trailing_slash(monkeypatch):
    monkeypatch.setenv("PSYCHOMETRIX_REPORT_BACKEND_URL", "http://report.test/")
    assert Settings().report_backend_url == "http://report.test"


def test_blank_passcode_is_none(monkeypatch):
    monkeypatch.setenv("PSYCHOMETRIX_ADMIN_PASSCODE", "   ")
    assert Settings().admin_passcode is None


def test_passcode_and_port_from_env(monkeypatch):
    monkeypatch.setenv("PSYCHOMETRIX_ADMIN_PASSCODE", "s3cret")
    monkeypatch.setenv("PSYCHOMETRIX_PORT", "9100")
    settings = Settings()
    assert settings.admin_passcode == "s3cret"
    assert settings.port == 9100
