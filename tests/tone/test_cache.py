from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import httplib2

from inbox_triage.exceptions import StyleSourceError
from inbox_triage.gmail.auth import GoogleClientConfig
from inbox_triage.sheets.client import SheetsStyleSource
from inbox_triage.tone.cache import ToneGuideCache
from inbox_triage.tone.guide import DEFAULT_STYLE_PROFILE

ROWS = [{"category": "Greeting", "context": "prospect_early", "example": "Hey!"}]
T0 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeSource:
    def __init__(self, outcomes) -> None:
        # Each outcome is a list of rows or an exception to raise.
        self.outcomes = list(outcomes)
        self.calls = 0

    def fetch_tabular_guide(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def fetch_historical_style_profile(self):
        return DEFAULT_STYLE_PROFILE


def test_second_call_within_window_reuses_guide() -> None:
    clock = FakeClock(T0)
    source = FakeSource([ROWS])
    cache = ToneGuideCache(source, clock=clock)

    first = cache.get_guide()
    clock.advance(minutes=59)
    second = cache.get_guide()

    assert first is not None
    assert second is first
    assert source.calls == 1


def test_call_after_window_refetches_once() -> None:
    clock = FakeClock(T0)
    source = FakeSource([ROWS])
    cache = ToneGuideCache(source, clock=clock)

    first = cache.get_guide()
    clock.advance(hours=1)
    second = cache.get_guide()
    third = cache.get_guide()

    assert source.calls == 2
    assert second is not first
    assert third is second
    assert cache.entry.fetched_at == T0 + timedelta(hours=1)


def test_failed_fetch_returns_none_and_is_not_cached() -> None:
    clock = FakeClock(T0)
    source = FakeSource([StyleSourceError("sheet unreachable"), ROWS])
    cache = ToneGuideCache(source, clock=clock)

    assert cache.get_guide() is None
    assert cache.entry is None
    assert not cache.is_valid()

    clock.advance(minutes=5)
    guide = cache.get_guide()

    assert guide is not None
    assert source.calls == 2
    assert cache.entry.fetched_at == T0 + timedelta(minutes=5)


def test_empty_dataset_is_treated_as_failure() -> None:
    source = FakeSource([[], ROWS])
    cache = ToneGuideCache(source, clock=FakeClock(T0))

    assert cache.get_guide() is None
    assert cache.get_guide() is not None
    assert source.calls == 2


def test_failed_refresh_keeps_previous_entry() -> None:
    clock = FakeClock(T0)
    source = FakeSource([ROWS, StyleSourceError("boom"), ROWS])
    cache = ToneGuideCache(source, clock=clock)

    original = cache.get_guide()
    clock.advance(hours=2)

    assert cache.get_guide() is None
    assert cache.entry.guide is original
    assert cache.entry.fetched_at == T0


def test_invalidate_forces_refetch() -> None:
    clock = FakeClock(T0)
    source = FakeSource([ROWS])
    cache = ToneGuideCache(source, clock=clock)

    cache.get_guide()
    assert cache.is_valid()
    cache.invalidate()
    assert not cache.is_valid()

    cache.get_guide()
    assert source.calls == 2


def test_is_valid_accepts_explicit_time() -> None:
    cache = ToneGuideCache(FakeSource([ROWS]), ttl=timedelta(minutes=10), clock=FakeClock(T0))
    cache.get_guide()

    assert cache.is_valid(T0 + timedelta(minutes=9))
    assert not cache.is_valid(T0 + timedelta(minutes=10))


def test_unreachable_sheet_yields_no_guide() -> None:
    service = MagicMock()
    error = httplib2.ServerNotFoundError("Unable to find the server at sheets.googleapis.com")
    service.spreadsheets.return_value.values.return_value.get.return_value.execute.side_effect = error
    source = SheetsStyleSource(
        GoogleClientConfig(credentials_path=Path("creds.json"), token_path=Path("token.json")),
        spreadsheet_id="sheet-1",
        service=service,
    )
    cache = ToneGuideCache(source, clock=FakeClock(T0))

    assert cache.get_guide() is None
    assert cache.entry is None
