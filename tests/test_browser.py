import subprocess
from urllib.parse import parse_qs, urlparse

import pytest

from crowcam.auth import browser
from crowcam.auth.browser import build_auth_url, escape_for_cmd, launch_browser
from crowcam.auth.credentials import AbortException


def test_auth_url_carries_client_redirect_and_scope():
    url = build_auth_url("my-client", "http://localhost/requestheaders.html", "https://www.googleapis.com/auth/youtube")
    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://accounts.google.com/o/oauth2/auth"

    params = parse_qs(parsed.query)
    assert params["client_id"] == ["my-client"]
    assert params["redirect_uri"] == ["http://localhost/requestheaders.html"]
    assert params["scope"] == ["https://www.googleapis.com/auth/youtube"]
    assert params["response_type"] == ["code"]
    assert params["access_type"] == ["offline"]


def test_stops_at_first_working_launcher(capsys):
    tried = []

    def make(name, ok):
        def launcher(url):
            tried.append(name)
            return ok
        return (name, launcher)

    used = launch_browser("https://example.test/?a=1&b=2", [make("one", False), make("two", True), make("three", True)])

    assert used == "two"
    assert tried == ["one", "two"]
    assert "Attempting to launch web browser with two..." in capsys.readouterr().out


def test_all_launchers_fail():
    with pytest.raises(AbortException) as exc:
        launch_browser("https://example.test/", [("one", lambda url: False), ("two", lambda url: False)])
    assert "Unable to launch web browser" in str(exc.value)


def test_missing_command_counts_as_failure(monkeypatch):
    def not_installed(*args, **kwargs):
        raise FileNotFoundError("xdg-open")

    monkeypatch.setattr(subprocess, "run", not_installed)
    assert browser.open_with_xdg_open("https://example.test/") is False


def test_nonzero_exit_counts_as_failure(monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda *a, **k: subprocess.CompletedProcess(a, 3))
    assert browser.open_with_open("https://example.test/") is False


def test_cmd_start_escapes_ampersands(monkeypatch):
    seen = {}

    def fake_run(command, **kwargs):
        seen["command"] = command
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert browser.open_with_cmd_start("https://example.test/?a=1&b=2") is True
    assert seen["command"] == ["cmd.exe", "/c", "start https://example.test/?a=1^&b=2"]


def test_escape_for_cmd():
    assert escape_for_cmd("a&b&c") == "a^&b^&c"


def test_default_launchers_run_in_order(monkeypatch, capsys):
    tried = []

    def failing_run(command, **kwargs):
        tried.append(command[0])
        return subprocess.CompletedProcess(command, 1)

    def failing_webbrowser(url, new=0, autoraise=True):
        tried.append("webbrowser")
        return False

    monkeypatch.setattr(subprocess, "run", failing_run)
    monkeypatch.setattr(browser.webbrowser, "open", failing_webbrowser)

    with pytest.raises(AbortException):
        launch_browser("https://example.test/?a=1&b=2")

    assert tried == ["xdg-open", "open", "webbrowser", "cmd.exe"]
    out = capsys.readouterr().out
    assert out.index("with xdg-open") < out.index("with open") < out.index("with python webbrowser") < out.index("with start")


def test_webbrowser_error_counts_as_failure(monkeypatch):
    def no_runnable_browser(url, new=0, autoraise=True):
        raise browser.webbrowser.Error("could not locate runnable browser")

    monkeypatch.setattr(browser.webbrowser, "open", no_runnable_browser)
    assert browser.open_with_webbrowser("https://example.test/") is False


def test_webbrowser_success(monkeypatch):
    monkeypatch.setattr(browser.webbrowser, "open", lambda url, new=0, autoraise=True: True)
    assert launch_browser("https://example.test/", [("python webbrowser", browser.open_with_webbrowser)]) == "python webbrowser"
