"""Network configuration constants for the psychometric test server."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 30.0

DEFAULT_ASSESSMENT_BACKEND_URL: str = "https://psychometric-backend.onrender.com"
DEFAULT_REPORT_BACKEND_URL: str = "https://psychometricbackend-production.up.railway.app"
DEFAULT_RESUME_BACKEND_URL: str = "http://127.0.0.1:8001"

# Logged-in sessions untouched for this long are evicted; the cookie lives as long.
SESSION_IDLE_TIMEOUT_SECONDS: int = 60 * 60 * 12
