from __future__ import annotations

from inbox_triage.parsing.address import extract_address, extract_display_name


def test_name_and_address_are_split() -> None:
    raw = "Jane Doe <jane@bigco.com>"

    assert extract_address(raw) == "jane@bigco.com"
    assert extract_display_name(raw) == "Jane Doe"


def test_display_name_is_trimmed() -> None:
    assert extract_display_name("   Jane Doe    <jane@bigco.com>") == "Jane Doe"


def test_bare_address_is_returned_unchanged() -> None:
    assert extract_address("sales@bigco.com") == "sales@bigco.com"
    # No bracket: the whole string is the "name" prefix.
    assert extract_display_name("sales@bigco.com") == "sales@bigco.com"


def test_missing_or_blank_name_falls_back_to_unknown() -> None:
    assert extract_display_name("<jane@bigco.com>") == "Unknown"
    assert extract_display_name("   <jane@bigco.com>") == "Unknown"
    assert extract_display_name("") == "Unknown"


def test_malformed_input_degrades_to_raw_string() -> None:
    assert extract_address("Jane <jane@bigco.com") == "Jane <jane@bigco.com"
    assert extract_address("") == ""
