from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from inbox_triage.models import ClassificationRecord, UrgentAlert
from inbox_triage.rules.core import Action
from inbox_triage.sources.base import RecordStore

logger = logging.getLogger(__name__)


class ActionHandler(ABC):
    @abstractmethod
    def handle(self, store: RecordStore, action: Action) -> None:
        """Execute one action."""
        ...


class UpsertClassificationHandler(ActionHandler):
    def handle(self, store: RecordStore, action: Action) -> None:
        if not isinstance(action.payload, ClassificationRecord):
            raise ValueError("UPSERT_CLASSIFICATION requires a ClassificationRecord payload")

        store.upsert_classification(action.payload)
        logger.debug(
            "STORE: message_id=%s category=%s reason=%s",
            action.message_id,
            action.payload.category.value,
            action.reason,
        )


class EmitAlertHandler(ActionHandler):
    def handle(self, store: RecordStore, action: Action) -> None:
        if not isinstance(action.payload, UrgentAlert):
            raise ValueError("EMIT_ALERT requires an UrgentAlert payload")

        store.insert_alert(action.payload)
        logger.info("ALERT: Alerted downstream agent: %s", action.payload.subject)
