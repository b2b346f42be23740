"""
Configuration for the CrowCam token tools.

Values resolve in this order: CLI flag, environment variable (optionally
from a .env file), built-in default.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from crowcam.auth.credentials import AbortException

# =============================================================================
# GOOGLE OAUTH ENDPOINTS
# =============================================================================

AUTH_ENDPOINT = "https://accounts.google.com/o/oauth2/auth"
TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
TOKENINFO_ENDPOINT = "https://oauth2.googleapis.com/tokeninfo"

# Installed application flow scope. "youtube.upload" and the device flow do
# not grant enough access for deleting videos.
DEFAULT_SCOPE = "https://www.googleapis.com/auth/youtube"
DEFAULT_REDIRECT_URI = "http://localhost/requestheaders.html"

# =============================================================================
# LOCAL FILES AND LIMITS
# =============================================================================

CLIENT_ID_JSON_NAME = "client_id.json"
TOKENS_FILE_NAME = "crowcam-tokens"

DEFAULT_INPUT_TIMEOUT = 360
DEFAULT_HTTP_TIMEOUT = 30


def load_env():
    """Load environment variables from .env file. Returns the path loaded, or None."""
    env_paths = [
        Path.cwd() / ".env",
        Path.home() / "crowcam" / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def client_id_json_path() -> Path:
    return Path(os.getenv("CROWCAM_CLIENT_ID_JSON", Path.cwd() / CLIENT_ID_JSON_NAME))


def tokens_file_path() -> Path:
    return Path(os.getenv("CROWCAM_TOKENS_FILE", Path.cwd() / TOKENS_FILE_NAME))


def redirect_uri() -> str:
    return os.getenv("CROWCAM_REDIRECT_URI", DEFAULT_REDIRECT_URI)


def oauth_scope() -> str:
    return os.getenv("CROWCAM_OAUTH_SCOPE", DEFAULT_SCOPE)


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise AbortException(f"{name} must be a number, got {raw!r}")


def input_timeout() -> int:
    return _env_number("CROWCAM_INPUT_TIMEOUT", DEFAULT_INPUT_TIMEOUT, int)


def http_timeout() -> float:
    return _env_number("CROWCAM_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT, float)
