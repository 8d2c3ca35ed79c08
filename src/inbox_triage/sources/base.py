"""Narrow interfaces to the collaborators the engine talks to."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from inbox_triage.models import ClassificationRecord, DealAssociation, LogEntry, UrgentAlert
from inbox_triage.tone.guide import StyleProfile


class InboxSource(Protocol):
    def list_unread_since(self, since: datetime, max_results: int = 50) -> List[str]: ...

    def fetch_full(self, message_id: str) -> Dict[str, Any]: ...


class DealDirectory(Protocol):
    def lookup_by_sender_address(self, address: str) -> Optional[DealAssociation]: ...


class RecordStore(Protocol):
    def upsert_classification(self, record: ClassificationRecord) -> None: ...

    def insert_alert(self, alert: UrgentAlert) -> None: ...

    def insert_log(self, entry: LogEntry) -> None: ...


class StyleReferenceSource(Protocol):
    def fetch_tabular_guide(self) -> Sequence[Mapping[str, str]]: ...

    def fetch_historical_style_profile(self) -> StyleProfile: ...
