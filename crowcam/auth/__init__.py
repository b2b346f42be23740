# =============================================================================
# CrowCam Token Preparation - Auth
# =============================================================================
"""
OAuth 2.0 installed-application flow for the CrowCam cleanup job.

Modules:
- credentials: client_id.json parsing, tokens file read/write
- browser: authorization URL and browser launch
- user_input: key-press gate, timed code prompt, code normalization
- oauth_client: token endpoint calls
- prepare_tokens: one-time interactive setup (CLI)
- verify_tokens: check a saved refresh token still works (CLI)
"""

from crowcam.auth.credentials import AbortException, ClientCredentials

__all__ = ["AbortException", "ClientCredentials"]
