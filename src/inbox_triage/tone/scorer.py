from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from inbox_triage.rules.keywords import HUMOR_WORDS, TONE_URGENCY_WORDS, WARMTH_WORDS, count_matches
from inbox_triage.sources.base import StyleReferenceSource
from inbox_triage.tone.cache import ToneGuideCache
from inbox_triage.tone.guide import StyleProfile, ToneGuide, ToneTrait

logger = logging.getLogger(__name__)

PROSPECT_EARLY = "prospect_early"
HIGH_URGENCY_LEVEL = "high"

SUGGEST_HUMOR = "Consider adding light humor for early-stage prospects"
SUGGEST_CONFIRM_URGENCY = (
    "High urgency detected but not typical for the reference style - "
    "confirm this tone is intentional"
)


class MatchVerdict(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ToneScores:
    # No keyword list feeds formality yet, so it stays 0.
    formality: int = 0
    humor: int = 0
    urgency: int = 0
    warmth: int = 0


@dataclass(frozen=True)
class ToneScoreResult:
    scores: ToneScores
    match_verdict: MatchVerdict
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": asdict(self.scores),
            "match_verdict": self.match_verdict.value,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class ToneContext:
    greeting: str
    sign_off: str
    tone: Optional[ToneTrait]
    urgency_phrases: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "greeting": self.greeting,
            "sign_off": self.sign_off,
            "tone": asdict(self.tone) if self.tone else None,
            "urgency_phrases": self.urgency_phrases,
        }


def count_tone(body: str) -> ToneScores:
    return ToneScores(
        humor=count_matches(body, HUMOR_WORDS),
        urgency=count_matches(body, TONE_URGENCY_WORDS),
        warmth=count_matches(body, WARMTH_WORDS),
    )


def compare_to_style(scores: ToneScores, profile: StyleProfile) -> MatchVerdict:
    # Formality does not take part in the distance.
    diff = (
        abs(scores.humor - profile.avg_humor)
        + abs(scores.urgency - profile.avg_urgency)
        + abs(scores.warmth - profile.avg_warmth)
    )
    if diff < 1.0:
        return MatchVerdict.HIGH
    if diff < 2.0:
        return MatchVerdict.MEDIUM
    return MatchVerdict.LOW


def generate_suggestions(scores: ToneScores, guide: ToneGuide, recipient_type: str) -> List[str]:
    suggestions: List[str] = []

    if scores.humor < 0.2 and recipient_type == PROSPECT_EARLY:
        suggestions.append(SUGGEST_HUMOR)

    if scores.urgency > 0.5 and not guide.has_urgency_level(HIGH_URGENCY_LEVEL):
        suggestions.append(SUGGEST_CONFIRM_URGENCY)

    return suggestions


class ToneScorer:
    """Scores draft bodies against the tone guide and the reference style profile."""

    def __init__(self, cache: ToneGuideCache, profiles: StyleReferenceSource) -> None:
        self._cache = cache
        self._profiles = profiles

    def score_tone(self, body: str, recipient_type: str) -> Optional[ToneScoreResult]:
        guide = self._cache.get_guide()
        if guide is None:
            return None

        scores = count_tone(body)
        profile = self._profiles.fetch_historical_style_profile()
        verdict = compare_to_style(scores, profile)
        logger.debug("TONE: scores=%s verdict=%s", scores, verdict.value)

        return ToneScoreResult(
            scores=scores,
            match_verdict=verdict,
            suggestions=generate_suggestions(scores, guide, recipient_type),
        )

    def get_tone_for_context(
        self, recipient_type: str, deal_stage: str, urgency: str
    ) -> Optional[ToneContext]:
        guide = self._cache.get_guide()
        if guide is None:
            return None

        return ToneContext(
            greeting=guide.greeting_for(recipient_type),
            sign_off=guide.sign_off_for(recipient_type),
            tone=guide.tone_for(deal_stage),
            urgency_phrases=guide.urgency_phrases_for(urgency),
        )
