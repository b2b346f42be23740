#!/usr/bin/env python3
"""
CrowCam Token Preparation - one-time OAuth setup

Obtains a YouTube refresh token for the CrowCam cleanup job using the
installed application flow, tests it, and saves it to the tokens file.

Only needs to be run once. Google may revoke a refresh token when:
- the user revokes access,
- the token goes unused for six months,
- the account passes its limit of outstanding tokens (the oldest is
  silently invalidated).
Run it again if that happens or if the tokens file is lost.

Usage:
    crowcam-prepare-tokens
    crowcam-prepare-tokens --client-id-json path/to/client_id.json --tokens-file path/to/crowcam-tokens
    crowcam-prepare-tokens --no-browser       # print the URL, open it yourself
    crowcam-prepare-tokens --check-scope      # also confirm the granted scope

Input:
    client_id.json   OAuth client credentials downloaded from Google Cloud Console

Output:
    crowcam-tokens   the refresh token, no trailing newline (only written on success)
"""

import argparse
import sys
from pathlib import Path

from crowcam import config
from crowcam.auth.browser import build_auth_url, launch_browser
from crowcam.auth.credentials import (
    AbortException,
    load_client_credentials,
    mask,
    print_abort,
    write_refresh_token,
)
from crowcam.auth.oauth_client import exchange_code, fetch_token_scopes, refresh_access_token
from crowcam.auth.user_input import prompt_for_auth_code, wait_for_keypress


BROWSER_INSTRUCTIONS = """
When the browser opens, remember to do the following:

 - Log into Google with your main user account if needed.

 - If you are given an option to select the Brand Account for your
   YouTube channel, then choose that Brand Account.

 - Grant the app the permission to manage your YouTube account.

 - The browser ends up on the redirect page. Copy the whole URL from the
   address bar (or just the code after "code=") to the clipboard.

 - Close the browser and come back to this window.
"""


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="One-time OAuth setup: obtain, test and save a YouTube refresh token"
    )
    parser.add_argument(
        "--client-id-json",
        type=Path,
        default=config.client_id_json_path(),
        help="OAuth client credentials file (default: ./client_id.json)",
    )
    parser.add_argument(
        "--tokens-file",
        type=Path,
        default=config.tokens_file_path(),
        help="Where to write the refresh token (default: ./crowcam-tokens)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not launch a browser, only print the authorization URL",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=config.input_timeout(),
        help="Seconds to wait for the pasted code (default: 360)",
    )
    parser.add_argument(
        "--check-scope",
        action="store_true",
        help="Look up the scopes granted to the test access token",
    )
    return parser.parse_args(argv)


def check_scope(access_token: str, expected_scope: str):
    """Warn, without failing, if the granted scopes lack the expected one."""
    try:
        scopes = fetch_token_scopes(access_token)
    except AbortException as e:
        print(f"  WARNING: Could not check scopes: {e}")
        return

    print(f"  Authorized scopes: {', '.join(scopes) or '(none)'}")
    if expected_scope not in scopes:
        print(f"  WARNING: {expected_scope} NOT included. The cleanup job will get")
        print("  'Insufficient Permission' errors with this token.")


def prepare_tokens(
    client_id_json: Path,
    tokens_file: Path,
    no_browser: bool = False,
    timeout: float = config.DEFAULT_INPUT_TIMEOUT,
    verify_scope: bool = False,
    stream=None,
) -> Path:
    """
    Run the whole flow. Raises AbortException on any failure.

    The tokens file is written last, after the refresh token has produced an
    access token, so a bad run leaves an earlier file untouched.
    """
    # Read client ID and client secret
    creds = load_client_credentials(client_id_json)
    print(f"Client ID:     {mask(creds.client_id)}")
    print(f"Client Secret: {mask(creds.client_secret, keep=4)}")
    print()

    # Authorize the account
    redirect_uri = config.redirect_uri()
    scope = config.oauth_scope()
    auth_url = build_auth_url(creds.client_id, redirect_uri, scope)

    print("=" * 70)
    print("Authorization URL:")
    print("=" * 70)
    print(auth_url)
    print()

    if no_browser:
        print("Open the URL above in a browser on any machine.")
        print(BROWSER_INSTRUCTIONS)
    else:
        print("-" * 70)
        print("     About to open your default web browser for authorization.")
        print("-" * 70)
        print(BROWSER_INSTRUCTIONS)
        wait_for_keypress()
        launch_browser(auth_url)

    code = prompt_for_auth_code(timeout, stream=stream)

    # Obtain the refresh token. A code can only be exchanged once.
    print()
    print("Exchanging authorization code for tokens...")
    refresh_token, _ = exchange_code(creds, code, redirect_uri)
    print(f"  Refresh token received: {mask(refresh_token)}")

    # Test the refresh token before saving it
    print("Testing refresh token...")
    access_token = refresh_access_token(creds, refresh_token)
    print("  Temporary test access token retrieved")

    if verify_scope:
        check_scope(access_token, scope)

    written = write_refresh_token(tokens_file, refresh_token)
    print()
    print(f"File Written: {written}")
    return written


def main(argv=None):
    config.load_env()

    print("=" * 70)
    print("CROWCAM TOKEN PREPARATION - YouTube OAuth Setup")
    print("=" * 70)
    print()

    try:
        args = parse_args(argv)
        print(f"Current working directory: {Path.cwd()}")
        print(f"Client credentials file:   {args.client_id_json.resolve()}")
        print(f"Tokens file:               {args.tokens_file.resolve()}")
        print()

        prepare_tokens(
            args.client_id_json,
            args.tokens_file,
            no_browser=args.no_browser,
            timeout=args.timeout,
            verify_scope=args.check_scope,
        )
    except AbortException as e:
        print_abort(e)
        sys.exit(1)

    print("Complete.")
    sys.exit(0)


if __name__ == "__main__":
    main()
