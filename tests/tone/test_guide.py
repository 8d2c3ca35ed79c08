from __future__ import annotations

from inbox_triage.tone.guide import (
    DEFAULT_GREETING,
    DEFAULT_SIGN_OFF,
    ToneGuide,
    ToneTrait,
    parse_tone_guide,
    rows_from_values,
)

SHEET = [
    ["Category", "Context", "Example", "Description", "Level", "Phrases"],
    ["Greeting", "prospect_early", "Hey {name}!", "", "", ""],
    ["Sign-off", "prospect_early", "Cheers,", "", "", ""],
    ["Tone", "default", "Thanks for the note.", "Friendly and direct", "", ""],
    ["Tone", "Negotiation", "Happy to work through it.", "Calm, firm", "", ""],
    ["Urgency", "", "", "", "high", "need this today"],
    ["Formality", "exec", "Dear", "", "", ""],
    ["Greeting", "customer"],
]


def test_rows_are_keyed_by_normalized_headers() -> None:
    rows = rows_from_values([["Category", "Sign off  Style"], ["Greeting", "x"]])
    assert rows == [{"category": "Greeting", "sign_off_style": "x"}]


def test_short_rows_are_padded() -> None:
    rows = rows_from_values(SHEET)
    assert rows[-1]["example"] == ""
    assert rows[-1]["phrases"] == ""


def test_empty_sheet_yields_no_rows() -> None:
    assert rows_from_values([]) == []


def test_parse_builds_each_mapping() -> None:
    guide = parse_tone_guide(rows_from_values(SHEET))

    assert guide.greeting_styles == {"prospect_early": "Hey {name}!", "customer": ""}
    assert guide.sign_offs == {"prospect_early": "Cheers,"}
    assert guide.tone_traits["Negotiation"] == ToneTrait(
        description="Calm, firm", example="Happy to work through it."
    )
    assert guide.urgency_phrases == {"high": "need this today"}


def test_unrecognized_categories_are_dropped() -> None:
    guide = parse_tone_guide(rows_from_values(SHEET))
    assert "exec" not in guide.greeting_styles
    assert "exec" not in guide.tone_traits


def test_accessors_fall_back_to_defaults() -> None:
    guide = parse_tone_guide(rows_from_values(SHEET))

    assert guide.greeting_for("prospect_early") == "Hey {name}!"
    assert guide.greeting_for("customer") == DEFAULT_GREETING
    assert guide.sign_off_for("partner") == DEFAULT_SIGN_OFF
    assert guide.tone_for("Discovery") == guide.tone_traits["default"]
    assert guide.urgency_phrases_for("low") == ""
    assert guide.has_urgency_level("high")


def test_tone_is_none_without_default_trait() -> None:
    assert ToneGuide().tone_for("Discovery") is None
