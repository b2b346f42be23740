#!/usr/bin/env python3
"""
Quick OAuth code exchange - paste the auth code (or redirect URL) as argument.

For when the interactive prompt timed out or the browser was opened on
another machine. Exchanges the code, tests the refresh token and writes the
tokens file, same as the last steps of crowcam-prepare-tokens.

Usage:
    python3 scripts/exchange_code.py "4/YOUR_AUTH_CODE_HERE"
    python3 scripts/exchange_code.py "http://localhost/requestheaders.html?code=4/...&scope=..."
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from crowcam import config
from crowcam.auth.credentials import (
    AbortException,
    load_client_credentials,
    mask,
    print_abort,
    write_refresh_token,
)
from crowcam.auth.oauth_client import exchange_code, refresh_access_token
from crowcam.auth.user_input import normalize_auth_code


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 1:
        print("Usage: python3 scripts/exchange_code.py 'YOUR_AUTH_CODE'")
        sys.exit(1)

    config.load_env()

    auth_code = normalize_auth_code(argv[0])
    if not auth_code:
        print("ERROR: No authorization code provided")
        sys.exit(1)

    print(f"Exchanging code: {mask(auth_code)}")

    try:
        creds = load_client_credentials(config.client_id_json_path())
        refresh_token, _ = exchange_code(creds, auth_code, config.redirect_uri())
        refresh_access_token(creds, refresh_token)
        written = write_refresh_token(config.tokens_file_path(), refresh_token)
    except AbortException as e:
        print_abort(e)
        sys.exit(1)

    print()
    print("=" * 70)
    print(f"SUCCESS! Refresh token tested and written to {written}")
    print("=" * 70)


if __name__ == "__main__":
    main()
