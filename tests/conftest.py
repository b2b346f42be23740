import json

import pytest

from crowcam import config

CLIENT_ID = "1234567890-abcdefghijklmnop.apps.googleusercontent.com"
CLIENT_SECRET = "GOCSPX-testsecretvalue"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)
        self._payload = payload

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeTokenEndpoint:
    """Stands in for requests.post against the token endpoint, keyed by grant_type."""

    def __init__(self, code_response=None, refresh_response=None):
        self.code_response = code_response or FakeResponse(
            {"access_token": "ya29.first", "refresh_token": "1//refresh-abc", "expires_in": 3599}
        )
        self.refresh_response = refresh_response or FakeResponse(
            {"access_token": "ya29.second", "expires_in": 3599, "token_type": "Bearer"}
        )
        self.calls = []

    def __call__(self, url, data=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "data": data, "timeout": timeout})
        if data["grant_type"] == "authorization_code":
            return self.code_response
        return self.refresh_response


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in (
        "CROWCAM_CLIENT_ID_JSON",
        "CROWCAM_TOKENS_FILE",
        "CROWCAM_REDIRECT_URI",
        "CROWCAM_OAUTH_SCOPE",
        "CROWCAM_INPUT_TIMEOUT",
        "CROWCAM_HTTP_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_env", lambda: None)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def client_id_json(tmp_path):
    path = tmp_path / "client_id.json"
    path.write_text(
        json.dumps(
            {
                "installed": {
                    "client_id": CLIENT_ID,
                    "project_id": "crowcam-test",
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "client_secret": CLIENT_SECRET,
                    "redirect_uris": ["http://localhost"],
                }
            },
            indent=2,
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def token_endpoint(monkeypatch):
    endpoint = FakeTokenEndpoint()
    monkeypatch.setattr("crowcam.auth.oauth_client.requests.post", endpoint)
    return endpoint
