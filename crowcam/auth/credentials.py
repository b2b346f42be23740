"""
Client credentials and refresh token storage.

client_id.json is the file Google Cloud Console hands out for an OAuth
client. Its fields sit under an "installed" (or "web") object, so lookups
search the whole document rather than a fixed path.

The tokens file holds a single refresh token with no trailing newline. The
cleanup job reads it verbatim.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, NamedTuple, Optional


class AbortException(Exception):
    """Raised when the run must abort. `context` holds raw text for diagnosis."""

    def __init__(self, message: str, context: Optional[str] = None):
        super().__init__(message)
        self.context = context


class ClientCredentials(NamedTuple):
    client_id: str
    client_secret: str


def one_line(text: str) -> str:
    """Collapse whitespace so raw output prints on one line."""
    return " ".join(str(text).split())


_MISSING = object()


def _find_first(node: Any, field: str) -> Any:
    """Depth-first search in document order. Returns _MISSING if absent."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == field:
                return value
            found = _find_first(value, field)
            if found is not _MISSING:
                return found
    elif isinstance(node, list):
        for item in node:
            found = _find_first(item, field)
            if found is not _MISSING:
                return found
    return _MISSING


def extract_field(raw_text: str, field: str) -> str:
    """
    Return the string value of the first occurrence of `field` in raw JSON text.

    Raises AbortException if the text is not JSON, the field is missing, or
    its value is empty or not a string.
    """
    try:
        data = json.loads(raw_text)
    except (TypeError, ValueError):
        raise AbortException(
            f"The variable {field} came up empty. Response was not valid JSON.",
            context=one_line(raw_text),
        )

    value = _find_first(data, field)
    if not isinstance(value, str) or not value.strip():
        raise AbortException(
            f"The variable {field} came up empty.",
            context=one_line(raw_text),
        )
    return value


def load_client_credentials(path: Path) -> ClientCredentials:
    """Read client_id and client_secret from a downloaded client_id.json."""
    path = Path(path)
    if not path.exists():
        raise AbortException(
            f"Missing file {path}\n"
            " - Download the OAuth client credentials (Desktop app type) from\n"
            "   Google Cloud Console -> APIs & Services -> Credentials, save it\n"
            f"   as {path.name} and run again."
        )

    raw = path.read_text(encoding="utf-8")
    try:
        client_id = extract_field(raw, "client_id")
        client_secret = extract_field(raw, "client_secret")
    except AbortException as e:
        raise AbortException(f"{e} Error parsing json file {path}.", context=e.context)

    return ClientCredentials(client_id, client_secret)


def read_refresh_token(path: Path) -> str:
    """Read the refresh token saved by prepare_tokens."""
    path = Path(path)
    if not path.exists():
        raise AbortException(
            f"Missing file {path}\n"
            " - Run crowcam-prepare-tokens once to create it."
        )

    token = path.read_text(encoding="utf-8")
    if not token.strip():
        raise AbortException(f"The variable refreshToken came up empty. Error parsing tokens file {path}.")
    return token.strip()


def write_refresh_token(path: Path, refresh_token: str) -> Path:
    """
    Write the refresh token verbatim, with no trailing newline.

    Goes through a temp file in the same directory and an atomic rename, so
    an earlier good file is never left half-written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(refresh_token)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return path


def mask(value: str, keep: int = 20) -> str:
    """Show only the start of a secret."""
    if len(value) <= keep:
        return value[: max(len(value) // 4, 1)] + "..."
    return value[:keep] + "..."


def print_abort(error: AbortException, show_context: bool = True):
    print()
    print(f"ERROR: {error}")
    if show_context and error.context:
        print(f"The raw output was: {error.context}")
    print("Exiting program.")
    print()
