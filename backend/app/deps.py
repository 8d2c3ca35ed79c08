# backend/app/deps.py
from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from inbox_triage.app.run import build_collaborators
from inbox_triage.app.tone_check import build_tone_scorer
from inbox_triage.config.settings import Settings, load_settings
from inbox_triage.sources.base import DealDirectory, InboxSource, RecordStore
from inbox_triage.tone.scorer import ToneScorer


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_tone_scorer() -> ToneScorer:
    # One scorer per process so the tone guide cache is shared across requests.
    return build_tone_scorer(get_settings())


def get_collaborators() -> Tuple[InboxSource, DealDirectory, RecordStore]:
    return build_collaborators(get_settings())
