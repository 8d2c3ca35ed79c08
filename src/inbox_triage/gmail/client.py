from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from inbox_triage.exceptions import InboxUnavailableError
from inbox_triage.gmail.auth import GoogleClientConfig, load_credentials

logger = logging.getLogger(__name__)

# Socket timeouts surface as OSError (TimeoutError).
TRANSPORT_ERRORS = (HttpError, HttpLib2Error, GoogleAuthError, OSError)


def unread_since_query(since: datetime) -> str:
    # Gmail "after:" expects seconds since epoch.
    return f"is:unread after:{max(0, int(since.timestamp()))}"


class GmailClient:
    """Inbox source backed by the Gmail API."""

    def __init__(self, cfg: GoogleClientConfig, service: Optional[Any] = None):
        self._cfg = cfg
        self._service = service

    def connect(self) -> None:
        """Create an authenticated Gmail API service client."""
        creds = load_credentials(self._cfg)
        self._service = build("gmail", "v1", credentials=creds)

    @property
    def service(self):
        if self._service is None:
            raise RuntimeError("GmailClient is not connected. Call connect() first.")
        return self._service

    def list_unread_since(self, since: datetime, max_results: int = 50) -> List[str]:
        """List ids of unread messages received after `since`."""
        query = unread_since_query(since)
        try:
            resp = (
                self.service.users()
                .messages()
                .list(userId=self._cfg.user_id, q=query, maxResults=max_results)
                .execute()
            )
        except TRANSPORT_ERRORS as exc:
            raise InboxUnavailableError(f"Listing messages failed ({query}): {exc}") from exc
        msgs = resp.get("messages", []) or []
        logger.info("GMAIL: Found %d unread emails", len(msgs))
        return [m["id"] for m in msgs]

    def fetch_full(self, message_id: str) -> Dict[str, Any]:
        """Fetch the format=full message resource (headers, MIME parts, thread id)."""
        try:
            return (
                self.service.users()
                .messages()
                .get(userId=self._cfg.user_id, id=message_id, format="full")
                .execute()
            )
        except TRANSPORT_ERRORS as exc:
            raise InboxUnavailableError(f"Fetching message {message_id} failed: {exc}") from exc
