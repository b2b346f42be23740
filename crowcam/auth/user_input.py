"""
Interactive terminal input: the key-press gate and the pasted code prompt.
"""

import queue
import sys
import threading
from typing import Optional
from urllib.parse import unquote

from crowcam.auth.credentials import AbortException

# Markers in the redirect URL the browser lands on, e.g.
#   http://localhost/requestheaders.html?code=4/0Ab...&scope=https://...
CODE_MARKER = "code="
SCOPE_MARKER = "&scope"


def wait_for_keypress(prompt: str = "Press any key when you are ready to perform these steps."):
    """Block until one key is pressed. Falls back to a line read when stdin is not a terminal."""
    print(prompt, end="", flush=True)

    if not sys.stdin.isatty():
        sys.stdin.readline()
        print()
        return

    if sys.platform == "win32":
        import msvcrt

        msvcrt.getwch()
    else:
        import termios
        import tty

        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            # cbreak, not raw: Ctrl-C must still interrupt
            tty.setcbreak(fd)
            sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    print()


def read_line_with_timeout(prompt: str, timeout: float, stream=None) -> Optional[str]:
    """
    Read one line from `stream` (stdin by default).

    Returns None on timeout and raises EOFError at end of input. The reader
    thread is a daemon, so an abandoned read does not keep the process alive.
    """
    stream = stream if stream is not None else sys.stdin
    if prompt:
        print(prompt, flush=True)

    result = queue.Queue(maxsize=1)

    def _reader():
        try:
            result.put(stream.readline())
        except (OSError, ValueError):
            result.put("")

    threading.Thread(target=_reader, daemon=True).start()

    try:
        line = result.get(timeout=timeout)
    except queue.Empty:
        return None

    if not line:
        raise EOFError("end of input")
    return line.rstrip("\r\n")


def normalize_auth_code(raw: str) -> str:
    """
    Accept a bare authorization code or the whole redirect URL.

    Everything up to and including "code=" is dropped, as is everything from
    "&scope" onward. A code cut out of a URL is percent-decoded.
    """
    code = raw.strip()
    from_url = False

    if CODE_MARKER in code:
        code = code.split(CODE_MARKER, 1)[1]
        from_url = True
    if SCOPE_MARKER in code:
        code = code.split(SCOPE_MARKER, 1)[0]
        from_url = True

    if from_url:
        code = unquote(code)
    return code.strip()


def prompt_for_auth_code(timeout: float, stream=None) -> str:
    print()
    print("-" * 70)
    try:
        raw = read_line_with_timeout(
            "PASTE the authentication code (or the whole URL from the browser) here now:",
            timeout,
            stream=stream,
        )
    except EOFError:
        raise AbortException("Input was closed before an authentication code was entered.")
    if raw is None:
        raise AbortException(f"No authentication code received within {int(timeout)} seconds.")

    code = normalize_auth_code(raw)
    if not code:
        raise AbortException("The variable authenticationCode came up empty. Error obtaining code.")

    print()
    print(f"Authentication code: {code}")
    return code
