from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

DEFAULT_GREETING = "Hi [name],"
DEFAULT_SIGN_OFF = "Best,"
DEFAULT_URGENCY_PHRASES = ""
DEFAULT_TONE_KEY = "default"

# Row "category" values understood by the parser; anything else is dropped.
CATEGORY_GREETING = "Greeting"
CATEGORY_SIGN_OFF = "Sign-off"
CATEGORY_TONE = "Tone"
CATEGORY_URGENCY = "Urgency"

Row = Mapping[str, str]


@dataclass(frozen=True)
class ToneTrait:
    description: str
    example: str


@dataclass(frozen=True)
class ToneGuide:
    greeting_styles: Dict[str, str] = field(default_factory=dict)
    sign_offs: Dict[str, str] = field(default_factory=dict)
    tone_traits: Dict[str, ToneTrait] = field(default_factory=dict)
    urgency_phrases: Dict[str, str] = field(default_factory=dict)

    def greeting_for(self, recipient_type: str) -> str:
        return self.greeting_styles.get(recipient_type) or DEFAULT_GREETING

    def sign_off_for(self, recipient_type: str) -> str:
        return self.sign_offs.get(recipient_type) or DEFAULT_SIGN_OFF

    def tone_for(self, deal_stage: str) -> Optional[ToneTrait]:
        """Trait for the deal stage, else the "default" trait, else None."""
        return self.tone_traits.get(deal_stage) or self.tone_traits.get(DEFAULT_TONE_KEY)

    def urgency_phrases_for(self, level: str) -> str:
        return self.urgency_phrases.get(level) or DEFAULT_URGENCY_PHRASES

    def has_urgency_level(self, level: str) -> bool:
        return bool(self.urgency_phrases.get(level))


@dataclass(frozen=True)
class CachedToneGuide:
    guide: ToneGuide
    fetched_at: datetime

    def is_valid(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.fetched_at < ttl


@dataclass(frozen=True)
class StyleProfile:
    """Baseline tone averages of the reference writer."""
    avg_formality: float
    avg_humor: float
    avg_urgency: float
    avg_warmth: float


# Used until the profile is computed from sent mail.
DEFAULT_STYLE_PROFILE = StyleProfile(
    avg_formality=0.7,
    avg_humor=0.3,
    avg_urgency=0.4,
    avg_warmth=0.8,
)


def normalize_header(header: str) -> str:
    return re.sub(r"\s+", "_", (header or "").strip().lower())


def rows_from_values(values: Sequence[Sequence[str]]) -> List[Dict[str, str]]:
    """
    Turn a sheet's cell grid into dict rows keyed by the first row.
    Short rows are padded with "".
    """
    if not values:
        return []
    headers = [normalize_header(h) for h in values[0]]
    rows: List[Dict[str, str]] = []
    for raw in values[1:]:
        rows.append({h: (raw[i] if i < len(raw) and raw[i] is not None else "") for i, h in enumerate(headers)})
    return rows


def parse_tone_guide(rows: Iterable[Row]) -> ToneGuide:
    greeting_styles: Dict[str, str] = {}
    sign_offs: Dict[str, str] = {}
    tone_traits: Dict[str, ToneTrait] = {}
    urgency_phrases: Dict[str, str] = {}

    for row in rows:
        category = row.get("category", "")
        context = row.get("context", "")

        if category == CATEGORY_GREETING:
            greeting_styles[context] = row.get("example", "")
        elif category == CATEGORY_SIGN_OFF:
            sign_offs[context] = row.get("example", "")
        elif category == CATEGORY_TONE:
            tone_traits[context] = ToneTrait(
                description=row.get("description", ""),
                example=row.get("example", ""),
            )
        elif category == CATEGORY_URGENCY:
            urgency_phrases[row.get("level", "")] = row.get("phrases", "")

    return ToneGuide(
        greeting_styles=greeting_styles,
        sign_offs=sign_offs,
        tone_traits=tone_traits,
        urgency_phrases=urgency_phrases,
    )
