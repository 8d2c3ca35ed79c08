from __future__ import annotations

import re

UNKNOWN_NAME = "Unknown"

_ADDRESS_RE = re.compile(r"<([^>]+)>")
_NAME_RE = re.compile(r"^([^<]+)")


def extract_address(raw: str) -> str:
    """Return the address inside angle brackets, or the raw string unchanged."""
    match = _ADDRESS_RE.search(raw or "")
    return match.group(1) if match else raw


def extract_display_name(raw: str) -> str:
    """
    Return the text before the first "<", trimmed.
    Falls back to "Unknown" when there is no such prefix or it is blank.
    """
    match = _NAME_RE.match(raw or "")
    name = match.group(1).strip() if match else ""
    return name or UNKNOWN_NAME
