from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from inbox_triage.exceptions import ConfigError

# Load .env once, globally
load_dotenv()

# Project root (independent of current working directory).
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def resolve_dir(env_key: str, default: str) -> Path:
    """
    Resolve a directory path from ENV.
    Relative paths are resolved against PROJECT_ROOT.
    """
    value = os.getenv(env_key, default)
    path = Path(value)

    if not path.is_absolute():
        path = PROJECT_ROOT / path

    return path


def _int_env(env_key: str, default: int) -> int:
    raw = os.getenv(env_key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    secrets_dir: Path
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    spreadsheet_id: Optional[str]
    sheet_name: str = "Sheet1"
    sheet_range: str = "A1:Z100"
    tone_cache_seconds: int = 3600
    lookback_hours: int = 24
    max_results: int = 50
    log_level: str = "INFO"

    @property
    def credentials_path(self) -> Path:
        return self.secrets_dir / "credentials.json"

    @property
    def token_path(self) -> Path:
        return self.secrets_dir / "google_token.json"

    def require_supabase(self) -> tuple[str, str]:
        if not self.supabase_url or not self.supabase_key:
            raise ConfigError(
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY to store classifications."
            )
        return self.supabase_url, self.supabase_key

    def require_spreadsheet(self) -> str:
        if not self.spreadsheet_id:
            raise ConfigError("Set TONE_GUIDE_SPREADSHEET_ID to use the tone guide.")
        return self.spreadsheet_id


def load_settings() -> Settings:
    return Settings(
        secrets_dir=resolve_dir("INBOX_TRIAGE_SECRETS_DIR", "secrets"),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
        spreadsheet_id=os.getenv("TONE_GUIDE_SPREADSHEET_ID"),
        sheet_name=os.getenv("TONE_GUIDE_SHEET_NAME", "Sheet1"),
        sheet_range=os.getenv("TONE_GUIDE_RANGE", "A1:Z100"),
        tone_cache_seconds=_int_env("TONE_GUIDE_CACHE_SECONDS", 3600),
        lookback_hours=_int_env("INBOX_TRIAGE_LOOKBACK_HOURS", 24),
        max_results=_int_env("INBOX_TRIAGE_MAX_RESULTS", 50),
        log_level=os.getenv("INBOX_TRIAGE_LOG_LEVEL", "INFO").upper(),
    )
