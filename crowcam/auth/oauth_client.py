"""
Google OAuth token endpoint calls.

Both grants post form data to the same endpoint. Responses are checked by
field presence, not just status code: a 200 without the expected token is
still a failure.
"""

from typing import Optional

import requests

from crowcam.auth.credentials import AbortException, ClientCredentials, extract_field, one_line
from crowcam.config import TOKEN_ENDPOINT, TOKENINFO_ENDPOINT, http_timeout


def _post_token_request(data: dict, timeout: Optional[float] = None) -> requests.Response:
    try:
        return requests.post(
            TOKEN_ENDPOINT,
            data=data,
            timeout=timeout if timeout is not None else http_timeout(),
        )
    except requests.RequestException as e:
        raise AbortException(f"Token request to {TOKEN_ENDPOINT} failed: {e}")


def exchange_code(creds: ClientCredentials, code: str, redirect_uri: str, timeout: Optional[float] = None):
    """
    Exchange an authorization code for a refresh token.

    A code is single use; a second exchange fails with invalid_grant.
    Returns (refresh_token, raw_response_text).
    """
    response = _post_token_request(
        {
            "code": code,
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        },
        timeout,
    )

    try:
        refresh_token = extract_field(response.text, "refresh_token")
    except AbortException as e:
        raise AbortException(
            f"{e} Code exchange failed (HTTP {response.status_code}).",
            context=e.context,
        )
    return refresh_token, response.text


def refresh_access_token(
    creds: ClientCredentials,
    refresh_token: str,
    timeout: Optional[float] = None,
    include_response: bool = True,
) -> str:
    """
    Get a short-lived access token from a refresh token.

    With include_response=False the raw response is left out of the error,
    so nothing credential-bearing reaches unattended logs.
    """
    response = _post_token_request(
        {
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        },
        timeout,
    )

    try:
        return extract_field(response.text, "access_token")
    except AbortException as e:
        raise AbortException(
            f"{e} Error accessing API (HTTP {response.status_code}).",
            context=e.context if include_response else None,
        )


def fetch_token_scopes(access_token: str, timeout: Optional[float] = None) -> list:
    """Return the scopes granted to an access token."""
    try:
        response = requests.get(
            TOKENINFO_ENDPOINT,
            params={"access_token": access_token},
            timeout=timeout if timeout is not None else http_timeout(),
        )
    except requests.RequestException as e:
        raise AbortException(f"Token info request failed: {e}")

    if response.status_code != 200:
        raise AbortException(
            f"Token info request failed (HTTP {response.status_code}).",
            context=one_line(response.text),
        )

    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict) or not isinstance(data.get("scope", ""), str):
        raise AbortException(
            "Token info response was not the expected JSON object.",
            context=one_line(response.text),
        )
    return data.get("scope", "").split()
