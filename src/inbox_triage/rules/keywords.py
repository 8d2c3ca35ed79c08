from __future__ import annotations

from typing import Sequence

# Matching is substring based, not token based: "eod" also matches "geodesic".

URGENCY_WORDS = (
    "urgent",
    "asap",
    "immediately",
    "contract",
    "cancel",
    "problem",
    "issue",
    "concerned",
    "frustrated",
    "deadline",
    "eod",
)

# Checked against the From header as well as the subject.
JUNK_INDICATORS = (
    "unsubscribe",
    "newsletter",
    "marketing",
    "promo",
    "no-reply@",
    "noreply@",
)

POSITIVE_WORDS = (
    "great",
    "excellent",
    "love",
    "perfect",
    "thanks",
    "appreciate",
)

NEGATIVE_WORDS = (
    "problem",
    "issue",
    "concern",
    "frustrated",
    "disappointed",
    "cancel",
    "urgent",
)

HUMOR_WORDS = ("haha", "lol", "funny", "joke", "humorous", "witty")

# Narrower than URGENCY_WORDS: tone scoring only looks at time pressure.
TONE_URGENCY_WORDS = ("urgent", "asap", "immediately", "deadline", "eod")

WARMTH_WORDS = ("thanks", "appreciate", "great", "awesome", "love")


def norm(text: str | None) -> str:
    """Normalize text for matching (None-safe, lowercased)."""
    return (text or "").lower()


def contains_any(text: str | None, needles: Sequence[str]) -> bool:
    """True if any needle is a substring of text (case-insensitive)."""
    t = norm(text)
    return any(n.lower() in t for n in needles)


def count_matches(text: str | None, needles: Sequence[str]) -> int:
    """Number of distinct needles present in text; repeats of one needle count once."""
    t = norm(text)
    return sum(1 for n in needles if n.lower() in t)
