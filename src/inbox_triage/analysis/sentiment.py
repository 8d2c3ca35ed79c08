from __future__ import annotations

from inbox_triage.models import SentimentLabel
from inbox_triage.rules.keywords import NEGATIVE_WORDS, POSITIVE_WORDS, count_matches


def analyze_sentiment(text: str) -> SentimentLabel:
    """
    Word-presence sentiment: more negative than positive words is "concerned",
    the reverse is "positive", a tie (including none at all) is "neutral".
    """
    positive = count_matches(text, POSITIVE_WORDS)
    negative = count_matches(text, NEGATIVE_WORDS)

    if negative > positive:
        return SentimentLabel.CONCERNED
    if positive > negative:
        return SentimentLabel.POSITIVE
    return SentimentLabel.NEUTRAL
