from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

from inbox_triage.actions.handlers import (
    ActionHandler,
    EmitAlertHandler,
    UpsertClassificationHandler,
)
from inbox_triage.rules.core import Action, ActionType
from inbox_triage.sources.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ActionExecutor:
    handlers: Dict[ActionType, ActionHandler]
    dry_run: bool = False
    # Off by default: a failed write must fail the email it belongs to.
    continue_on_error: bool = False

    def run(self, store: RecordStore, actions: list[Action]) -> None:
        for action in actions:
            handler = self.handlers.get(action.type)
            if not handler:
                logger.warning("No handler registered for action type: %s", action.type.value)
                continue

            if self.dry_run:
                logger.info(
                    "[DRY-RUN] would run type=%s message_id=%s reason=%s",
                    action.type.value,
                    action.message_id,
                    action.reason,
                )
                continue

            try:
                handler.handle(store, action)
            except Exception as e:
                logger.error(
                    "Action failed type=%s message_id=%s reason=%s err=%s",
                    action.type.value,
                    action.message_id,
                    action.reason,
                    e,
                )
                if not self.continue_on_error:
                    raise


def default_executor(*, dry_run: bool = False) -> ActionExecutor:
    return ActionExecutor(
        handlers={
            ActionType.UPSERT_CLASSIFICATION: UpsertClassificationHandler(),
            ActionType.EMIT_ALERT: EmitAlertHandler(),
        },
        dry_run=dry_run,
    )
