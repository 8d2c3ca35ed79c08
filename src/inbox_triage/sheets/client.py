from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from httplib2 import HttpLib2Error
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from inbox_triage.exceptions import StyleSourceError
from inbox_triage.gmail.auth import GoogleClientConfig, load_credentials
from inbox_triage.tone.guide import DEFAULT_STYLE_PROFILE, StyleProfile, rows_from_values

logger = logging.getLogger(__name__)


class SheetsStyleSource:
    """Style reference source reading the tone guide from a Google Sheet."""

    def __init__(
        self,
        cfg: GoogleClientConfig,
        spreadsheet_id: str,
        sheet_name: str = "Sheet1",
        cell_range: str = "A1:Z100",
        service: Optional[Any] = None,
    ):
        self._cfg = cfg
        self._spreadsheet_id = spreadsheet_id
        self._range = f"{sheet_name}!{cell_range}"
        self._service = service

    def connect(self) -> None:
        creds = load_credentials(self._cfg)
        self._service = build("sheets", "v4", credentials=creds)

    @property
    def service(self):
        if self._service is None:
            raise RuntimeError("SheetsStyleSource is not connected. Call connect() first.")
        return self._service

    def fetch_tabular_guide(self) -> List[Dict[str, str]]:
        """Rows of the guide keyed by normalized header (e.g. "category", "context")."""
        try:
            resp = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=self._spreadsheet_id, range=self._range)
                .execute()
            )
        except (HttpError, HttpLib2Error, GoogleAuthError, OSError) as exc:
            raise StyleSourceError(f"Reading {self._range} failed: {exc}") from exc

        values = resp.get("values") or []
        logger.debug("SHEETS: %d raw rows from %s", len(values), self._range)
        return rows_from_values(values)

    def fetch_historical_style_profile(self) -> StyleProfile:
        # TODO: derive the averages from sent mail once sent history is stored.
        return DEFAULT_STYLE_PROFILE
