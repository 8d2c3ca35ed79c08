from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, Optional

from inbox_triage.exceptions import StyleSourceError
from inbox_triage.sources.base import StyleReferenceSource
from inbox_triage.tone.guide import CachedToneGuide, ToneGuide, parse_tone_guide

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToneGuideCache:
    """
    Single-slot, time-boxed cache for the parsed tone guide.

    A refresh replaces the entry as a whole. Failed fetches are never cached,
    so the next call after a failure tries the source again.
    """

    def __init__(
        self,
        source: StyleReferenceSource,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._source = source
        self._ttl = ttl
        self._clock = clock
        self._entry: Optional[CachedToneGuide] = None
        # Held across the fetch so at most one refresh is in flight.
        self._lock = Lock()

    @property
    def entry(self) -> Optional[CachedToneGuide]:
        return self._entry

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        entry = self._entry
        return entry is not None and entry.is_valid(now or self._clock(), self._ttl)

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None

    def get_guide(self) -> Optional[ToneGuide]:
        with self._lock:
            entry = self._entry
            now = self._clock()
            if entry is not None and entry.is_valid(now, self._ttl):
                return entry.guide

            try:
                rows = self._source.fetch_tabular_guide()
            except StyleSourceError as exc:
                logger.error("TONE_GUIDE: Error fetching tone guide: %s", exc)
                return None

            if not rows:
                logger.warning("TONE_GUIDE: No data found in tone guide")
                return None

            guide = parse_tone_guide(rows)
            self._entry = CachedToneGuide(guide=guide, fetched_at=self._clock())
            logger.info("TONE_GUIDE: Tone guide fetched (%d rows)", len(rows))
            return guide
