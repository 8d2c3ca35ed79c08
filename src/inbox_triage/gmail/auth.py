from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from inbox_triage.exceptions import ConfigError

# One token serves both the inbox and the tone guide sheet.
SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/spreadsheets.readonly",
]


@dataclass(frozen=True)
class GoogleClientConfig:
    # Path to OAuth client credentials downloaded from Google Cloud Console.
    credentials_path: Path
    # Token cache will be created here after first login.
    token_path: Path
    # Gmail userId, "me" refers to the authenticated user.
    user_id: str = "me"


def load_credentials(cfg: GoogleClientConfig, scopes: Sequence[str] = SCOPES) -> Credentials:
    """Load the cached token, refreshing or re-running the consent flow when needed."""
    creds = None

    if cfg.token_path.exists():
        creds = Credentials.from_authorized_user_file(str(cfg.token_path), list(scopes))

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except GoogleAuthError as exc:
            raise ConfigError(f"Could not refresh Google token at {cfg.token_path}: {exc}") from exc
    else:
        if not cfg.credentials_path.exists():
            raise ConfigError(
                f"Missing Google credentials at {cfg.credentials_path}. "
                "Did you configure INBOX_TRIAGE_SECRETS_DIR?"
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(cfg.credentials_path), list(scopes))
        creds = flow.run_local_server(port=0)

    # Save the credentials for the next run.
    cfg.token_path.parent.mkdir(parents=True, exist_ok=True)
    cfg.token_path.write_text(creds.to_json(), encoding="utf-8")
    return creds
