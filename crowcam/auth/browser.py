"""
Authorization URL and browser launch.

The launch tries the open/start commands of the common Linux, macOS and
Windows shells in turn. The first one that reports success wins.
"""

import subprocess
import webbrowser
from urllib.parse import urlencode

from crowcam.auth.credentials import AbortException
from crowcam.config import AUTH_ENDPOINT


def build_auth_url(client_id: str, redirect_uri: str, scope: str) -> str:
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": scope,
        "response_type": "code",
        "access_type": "offline",
        "prompt": "consent",  # Force consent so a refresh token is always issued
    }
    return f"{AUTH_ENDPOINT}?{urlencode(params)}"


def _run_command(command: list) -> bool:
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        # Command not installed on this host
        return False
    return result.returncode == 0


def open_with_xdg_open(url: str) -> bool:
    return _run_command(["xdg-open", url])


def open_with_open(url: str) -> bool:
    return _run_command(["open", url])


def open_with_webbrowser(url: str) -> bool:
    try:
        return bool(webbrowser.open(url, new=1, autoraise=True))
    except webbrowser.Error:
        return False


def escape_for_cmd(url: str) -> str:
    """cmd.exe treats a bare & as a command separator; escape with a caret."""
    return url.replace("&", "^&")


def open_with_cmd_start(url: str) -> bool:
    return _run_command(["cmd.exe", "/c", f"start {escape_for_cmd(url)}"])


LAUNCHERS = [
    ("xdg-open", open_with_xdg_open),
    ("open", open_with_open),
    ("python webbrowser", open_with_webbrowser),
    ("start", open_with_cmd_start),
]


def launch_browser(url: str, launchers=None) -> str:
    """
    Open `url` in a web browser.

    Returns the name of the mechanism that worked. Raises AbortException if
    every mechanism fails.
    """
    for name, launcher in (launchers if launchers is not None else LAUNCHERS):
        print(f"Attempting to launch web browser with {name}...")
        if launcher(url):
            return name

    raise AbortException(
        "Unable to launch web browser.\n"
        "You may be running this on a system which cannot use any of the\n"
        "common commands for starting a browser from a script.\n"
        "Re-run with --no-browser and open the authorization URL by hand."
    )
