#!/usr/bin/env python3
"""
Check that the saved refresh token still works.

Performs the same authentication the cleanup job does at startup: read the
client credentials and the tokens file, then trade the refresh token for an
access token. Prints no credentials or tokens, so it is safe to run from cron.

Usage:
    crowcam-verify-tokens
    crowcam-verify-tokens --client-id-json path/to/client_id.json --tokens-file path/to/crowcam-tokens
"""

import argparse
import sys
from pathlib import Path

from crowcam import config
from crowcam.auth.credentials import (
    AbortException,
    load_client_credentials,
    print_abort,
    read_refresh_token,
)
from crowcam.auth.oauth_client import refresh_access_token


def verify_tokens(client_id_json: Path, tokens_file: Path) -> bool:
    creds = load_client_credentials(client_id_json)
    refresh_token = read_refresh_token(tokens_file)
    refresh_access_token(creds, refresh_token, include_response=False)
    return True


def main(argv=None):
    config.load_env()

    parser = argparse.ArgumentParser(description="Check that the saved YouTube refresh token works")
    parser.add_argument("--client-id-json", type=Path, default=config.client_id_json_path())
    parser.add_argument("--tokens-file", type=Path, default=config.tokens_file_path())
    args = parser.parse_args(argv)

    print(f"Client credentials: {args.client_id_json}")
    print(f"Tokens file:        {args.tokens_file}")

    try:
        verify_tokens(args.client_id_json, args.tokens_file)
    except AbortException as e:
        # The raw output may echo the client secret
        print_abort(e, show_context=False)
        sys.exit(1)

    print("Access Token retrieved. Refresh token is valid.")
    sys.exit(0)


if __name__ == "__main__":
    main()
