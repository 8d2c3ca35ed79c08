from __future__ import annotations

import base64
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

from inbox_triage.models import NormalizedEmail
from inbox_triage.parsing.address import extract_address, extract_display_name

DEFAULT_SUBJECT = "No Subject"
DEFAULT_FROM = "Unknown"


def headers_from_payload(payload: dict) -> Dict[str, str]:
    return {h["name"]: h["value"] for h in payload.get("headers", []) if "name" in h}


def extract_body_from_payload(payload: dict) -> str:
    """
    Extract the plain text body from a Gmail message payload.
    Only text/plain is considered; no plain part means an empty body.
    """
    def decode(data: str) -> str:
        # Gmail omits base64 padding.
        padded = data + "=" * (-len(data) % 4)
        return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")

    def find_part(part: dict) -> Optional[str]:
        # Depth-first search through multipart payloads.
        if part.get("mimeType") == "text/plain" and part.get("body", {}).get("data"):
            return decode(part["body"]["data"])
        for child in part.get("parts", []) or []:
            found = find_part(child)
            if found is not None:
                return found
        return None

    return find_part(payload) or ""


def parse_received_at(value: Optional[str], now: datetime) -> datetime:
    if not value:
        return now
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return now
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_normalized_email(message: Dict[str, Any], now: Optional[datetime] = None) -> NormalizedEmail:
    """Normalize a format=full Gmail message resource, filling missing headers with defaults."""
    now = now or datetime.now(timezone.utc)
    payload = message.get("payload", {}) or {}
    headers = headers_from_payload(payload)

    from_header = headers.get("From") or DEFAULT_FROM

    return NormalizedEmail(
        message_id=str(message.get("id", "")),
        thread_id=message.get("threadId"),
        from_header=from_header,
        sender_display=extract_display_name(from_header),
        sender_address=extract_address(from_header),
        recipient=headers.get("To", ""),
        subject=headers.get("Subject") or DEFAULT_SUBJECT,
        body=extract_body_from_payload(payload),
        received_at=parse_received_at(headers.get("Date"), now),
    )
