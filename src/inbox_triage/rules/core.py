from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from inbox_triage.models import (
    Category,
    ClassificationRecord,
    DealAssociation,
    NormalizedEmail,
    UrgentAlert,
)


@dataclass(frozen=True)
class MailItem:
    email: NormalizedEmail
    deal: Optional[DealAssociation] = None  # None means "no known deal"


class ActionType(str, Enum):
    UPSERT_CLASSIFICATION = "upsert_classification"
    EMIT_ALERT = "emit_alert"


@dataclass(frozen=True)
class Action:
    type: ActionType
    message_id: str
    payload: Union[ClassificationRecord, UrgentAlert]
    reason: str = ""


class Rule(Protocol):
    name: str
    category: Category

    def match(self, mail: MailItem) -> tuple[bool, str]: ...
