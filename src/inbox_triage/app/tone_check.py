from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence

from inbox_triage.app.run import configure_logging
from inbox_triage.config.settings import Settings, load_settings
from inbox_triage.exceptions import ConfigError
from inbox_triage.gmail.auth import GoogleClientConfig
from inbox_triage.sheets.client import SheetsStyleSource
from inbox_triage.tone.cache import ToneGuideCache
from inbox_triage.tone.scorer import ToneScorer

logger = logging.getLogger(__name__)


def build_tone_scorer(settings: Settings) -> ToneScorer:
    source = SheetsStyleSource(
        GoogleClientConfig(credentials_path=settings.credentials_path, token_path=settings.token_path),
        spreadsheet_id=settings.require_spreadsheet(),
        sheet_name=settings.sheet_name,
        cell_range=settings.sheet_range,
    )
    source.connect()
    cache = ToneGuideCache(source, ttl=timedelta(seconds=settings.tone_cache_seconds))
    return ToneScorer(cache, source)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Score a draft against the tone guide.")
    parser.add_argument("draft", nargs="?", help="Path to the draft body (reads stdin when omitted)")
    parser.add_argument("--recipient-type", default="default")
    parser.add_argument("--deal-stage", default="default")
    parser.add_argument("--urgency", default="normal")
    args = parser.parse_args(argv)
    configure_logging()

    body = Path(args.draft).read_text(encoding="utf-8") if args.draft else sys.stdin.read()

    try:
        scorer = build_tone_scorer(load_settings())
    except (ConfigError, RuntimeError, OSError) as exc:
        logger.error("TONE: Fatal error: %s", exc)
        return 1

    result = scorer.score_tone(body, args.recipient_type)
    if result is None:
        logger.error("TONE: No tone guide available")
        return 1

    context = scorer.get_tone_for_context(args.recipient_type, args.deal_stage, args.urgency)
    print(
        json.dumps(
            {"score": result.to_dict(), "context": context.to_dict() if context else None},
            indent=2,
            ensure_ascii=False,
        )
    )
    return 0
