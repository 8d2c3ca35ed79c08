from __future__ import annotations

import base64
import socket
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from inbox_triage.app.run import main, run_once
from inbox_triage.exceptions import InboxUnavailableError, RecordStoreError
from inbox_triage.gmail.auth import GoogleClientConfig
from inbox_triage.gmail.client import GmailClient
from inbox_triage.models import Category, DealAssociation, DealStage

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def _message(mid: str, sender: str, subject: str, body: str) -> dict:
    return {
        "id": mid,
        "threadId": f"t-{mid}",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "From", "value": sender},
                {"name": "To", "value": "mat@craftable.com"},
                {"name": "Subject", "value": subject},
                {"name": "Date", "value": "Wed, 01 May 2024 08:00:00 +0000"},
            ],
            "parts": [{"mimeType": "text/plain", "body": {"data": _b64(body)}}],
        },
    }


class FakeInbox:
    def __init__(self, messages: Dict[str, dict], fail_list: bool = False, broken: tuple = ()) -> None:
        self.messages = messages
        self.fail_list = fail_list
        self.broken = set(broken)
        self.since: Optional[datetime] = None
        self.max_results: Optional[int] = None

    def list_unread_since(self, since: datetime, max_results: int = 50) -> List[str]:
        if self.fail_list:
            raise InboxUnavailableError("gmail down")
        self.since = since
        self.max_results = max_results
        return list(self.messages)

    def fetch_full(self, message_id: str) -> dict:
        if message_id in self.broken:
            raise InboxUnavailableError(f"cannot fetch {message_id}")
        return self.messages[message_id]


class FakeDirectory:
    def __init__(self, deals: Dict[str, DealAssociation]) -> None:
        self.deals = deals
        self.lookups: List[str] = []

    def lookup_by_sender_address(self, address: str) -> Optional[DealAssociation]:
        self.lookups.append(address)
        return self.deals.get(address)


class FakeStore:
    def __init__(self, fail_for: tuple = ()) -> None:
        self.fail_for = set(fail_for)
        self.records: Dict[str, object] = {}
        self.alerts: List[object] = []
        self.logs: List[object] = []

    def upsert_classification(self, record) -> None:
        if record.message_id in self.fail_for:
            raise RecordStoreError("write failed")
        self.records[record.message_id] = record

    def insert_alert(self, alert) -> None:
        self.alerts.append(alert)

    def insert_log(self, entry) -> None:
        self.logs.append(entry)


MESSAGES = {
    "m1": _message("m1", "sales@bigco.com", "Quick question", "thanks for the call"),
    "m2": _message(
        "m2",
        "Jane Doe <jane@bigco.com>",
        "Renewal",
        "this is urgent, please respond ASAP. " + "details " * 60,
    ),
    "m3": _message("m3", "newsletter@deals.com", "50% off - unsubscribe anytime", "sale"),
}
DEALS = {"jane@bigco.com": DealAssociation("d-1", "BigCo rollout", DealStage.NEGOTIATION)}


def test_batch_is_classified_and_urgent_mail_alerts_once() -> None:
    inbox = FakeInbox(MESSAGES)
    directory = FakeDirectory(DEALS)
    store = FakeStore()

    summary = run_once(inbox, directory, store, now=NOW)

    assert summary == {"emails_checked": 3, "processed": 3, "errors": 0, "urgent": 1}
    assert store.records["m1"].category == Category.FYI
    assert store.records["m2"].category == Category.URGENT
    assert store.records["m3"].category == Category.JUNK
    assert len(store.alerts) == 1
    assert store.alerts[0].message_id == "m2"
    assert len(store.alerts[0].preview) == 200
    assert directory.lookups == ["sales@bigco.com", "jane@bigco.com", "newsletter@deals.com"]


def test_lookback_window_and_limit_are_passed_to_inbox() -> None:
    inbox = FakeInbox({})
    run_once(inbox, FakeDirectory({}), FakeStore(), now=NOW, lookback_hours=6, max_results=10)

    assert inbox.since == NOW - timedelta(hours=6)
    assert inbox.max_results == 10


def test_completion_is_logged() -> None:
    store = FakeStore()
    run_once(FakeInbox(MESSAGES), FakeDirectory({}), store, now=NOW)

    assert [entry.action for entry in store.logs] == ["Inbox check completed"]
    assert store.logs[0].details["emailsChecked"] == 3


def test_per_email_failures_do_not_stop_the_batch() -> None:
    inbox = FakeInbox(MESSAGES, broken=("m1",))
    store = FakeStore(fail_for=("m2",))
    events = []

    summary = run_once(
        inbox,
        FakeDirectory(DEALS),
        store,
        now=NOW,
        progress_cb=lambda step, payload: events.append((step, payload)),
    )

    assert summary["processed"] == 1
    assert summary["errors"] == 2
    assert list(store.records) == ["m3"]
    # No alert without a stored classification.
    assert store.alerts == []
    errors = [payload["error"] for step, payload in events if step == "error"]
    assert [e["message_id"] for e in errors] == ["m1", "m2"]
    assert errors[1]["subject"] == "Renewal"
    assert events[-1][0] == "done"


def test_inbox_listing_failure_is_logged_and_raised() -> None:
    store = FakeStore()

    with pytest.raises(InboxUnavailableError):
        run_once(FakeInbox({}, fail_list=True), FakeDirectory({}), store, now=NOW)

    assert [(e.action, e.status) for e in store.logs] == [("Inbox check failed", "error")]


def test_reprocessing_is_idempotent() -> None:
    store = FakeStore()
    inbox = FakeInbox(MESSAGES)

    run_once(inbox, FakeDirectory(DEALS), store, now=NOW)
    first = dict(store.records)
    run_once(inbox, FakeDirectory(DEALS), store, now=NOW)

    assert store.records == first


def test_main_returns_one_on_startup_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)

    assert main([]) == 1


def test_main_returns_one_when_inbox_cannot_be_listed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "inbox_triage.app.run.build_collaborators",
        lambda settings: (FakeInbox({}, fail_list=True), FakeDirectory({}), FakeStore()),
    )
    assert main([]) == 1


def test_main_returns_zero_on_completion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "inbox_triage.app.run.build_collaborators",
        lambda settings: (FakeInbox(MESSAGES), FakeDirectory({}), FakeStore()),
    )
    assert main(["--max-results", "5"]) == 0


def test_inbox_transport_timeout_takes_the_failure_path() -> None:
    service = MagicMock()
    service.users.return_value.messages.return_value.list.return_value.execute.side_effect = (
        socket.timeout("timed out")
    )
    inbox = GmailClient(GoogleClientConfig(Path("creds.json"), Path("token.json")), service=service)
    store = FakeStore()

    with pytest.raises(InboxUnavailableError):
        run_once(inbox, FakeDirectory({}), store, now=NOW)

    assert [e.action for e in store.logs] == ["Inbox check failed"]


def test_main_honours_zero_lookback(monkeypatch: pytest.MonkeyPatch) -> None:
    inbox = FakeInbox({})
    monkeypatch.setattr(
        "inbox_triage.app.run.build_collaborators",
        lambda settings: (inbox, FakeDirectory({}), FakeStore()),
    )

    assert main(["--lookback-hours", "0"]) == 0
    assert datetime.now(timezone.utc) - inbox.since < timedelta(minutes=1)
