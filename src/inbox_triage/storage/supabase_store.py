from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from inbox_triage.exceptions import DealDirectoryError, RecordStoreError
from inbox_triage.models import (
    ClassificationRecord,
    DealAssociation,
    LogEntry,
    UrgentAlert,
    parse_stage,
)

logger = logging.getLogger(__name__)

CLASSIFICATIONS_TABLE = "email_categories"
ALERTS_TABLE = "agent_alerts"
LOGS_TABLE = "clawd_logs"
DEAL_CONTACTS_TABLE = "deal_contacts"

_STORE_ERRORS = (APIError, httpx.HTTPError)


def connect(url: str, key: str) -> Client:
    return create_client(url, key)


class SupabaseRecordStore:
    """Record store writing classification, alert and log rows to Supabase."""

    def __init__(self, client: Client):
        self._client = client

    def _write(self, table: str, op: str, row: Dict[str, Any], **kwargs: Any) -> None:
        try:
            query = getattr(self._client.table(table), op)(row, **kwargs)
            query.execute()
        except _STORE_ERRORS as exc:
            raise RecordStoreError(f"{op} into {table} failed: {exc}") from exc

    def upsert_classification(self, record: ClassificationRecord) -> None:
        # Keyed by message id so reprocessing a message overwrites its row.
        self._write(CLASSIFICATIONS_TABLE, "upsert", record.to_row(), on_conflict="message_id")

    def insert_alert(self, alert: UrgentAlert) -> None:
        self._write(ALERTS_TABLE, "insert", alert.to_row())

    def insert_log(self, entry: LogEntry) -> None:
        self._write(LOGS_TABLE, "insert", entry.to_row())


class SupabaseDealDirectory:
    """Deal lookup by exact sender address against the deal_contacts table."""

    def __init__(self, client: Client):
        self._client = client

    def _query(self, address: str) -> list[Dict[str, Any]]:
        try:
            resp = (
                self._client.table(DEAL_CONTACTS_TABLE)
                .select("deal_id, deal_name, stage")
                .eq("email", address)
                .limit(2)
                .execute()
            )
        except _STORE_ERRORS as exc:
            raise DealDirectoryError(f"Deal lookup for {address} failed: {exc}") from exc
        return list(resp.data or [])

    def lookup_by_sender_address(self, address: str) -> Optional[DealAssociation]:
        if not address:
            return None

        try:
            rows = self._query(address)
        except DealDirectoryError as exc:
            # An unreachable directory counts as "no known deal" for this email.
            logger.warning("DEALS: %s", exc)
            return None

        if not rows:
            return None
        if len(rows) > 1:
            logger.warning("DEALS: Multiple deal contacts for %s, ignoring", address)
            return None

        row = rows[0]
        return DealAssociation(
            deal_id=str(row.get("deal_id") or ""),
            deal_name=row.get("deal_name") or "",
            stage=parse_stage(row.get("stage")),
        )
