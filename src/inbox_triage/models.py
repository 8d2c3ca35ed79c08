from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class Category(str, Enum):
    URGENT = "URGENT"
    REPLY_NEEDED = "REPLY_NEEDED"
    FYI = "FYI"
    JUNK = "JUNK"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    CONCERNED = "concerned"
    NEUTRAL = "neutral"


class DealStage(str, Enum):
    QUALIFICATION = "Qualification"
    DISCOVERY = "Discovery"
    EVALUATION = "Evaluation"
    CONFIRMATION = "Confirmation"
    NEGOTIATION = "Negotiation"
    CLOSED_WON = "Closed Won"
    CLOSED_LOST = "Closed Lost"


# Stages considered "in flight" for urgency escalation.
ACTIVE_DEAL_STAGES = frozenset(
    {
        DealStage.QUALIFICATION,
        DealStage.DISCOVERY,
        DealStage.EVALUATION,
        DealStage.CONFIRMATION,
        DealStage.NEGOTIATION,
    }
)


def parse_stage(value: Optional[str]) -> Union[DealStage, str]:
    # Unknown stages stay plain strings; they never count as active.
    try:
        return DealStage(value)
    except ValueError:
        return value or ""


@dataclass(frozen=True)
class NormalizedEmail:
    message_id: str
    from_header: str
    sender_display: str
    sender_address: str
    recipient: str
    subject: str
    body: str
    received_at: datetime
    thread_id: Optional[str] = None


@dataclass(frozen=True)
class DealAssociation:
    deal_id: str
    deal_name: str
    stage: Union[DealStage, str]

    @property
    def is_active(self) -> bool:
        return self.stage in ACTIVE_DEAL_STAGES

    @property
    def stage_name(self) -> str:
        return self.stage.value if isinstance(self.stage, DealStage) else self.stage


@dataclass(frozen=True)
class EmailAnalysis:
    category: Category
    sentiment: SentimentLabel
    rule_name: str
    reason: str = ""
    deal: Optional[DealAssociation] = None


@dataclass(frozen=True)
class ClassificationRecord:
    message_id: str
    subject: str
    from_email: str
    from_name: str
    category: Category
    sentiment: SentimentLabel
    received_at: datetime
    processed_at: datetime
    thread_id: Optional[str] = None
    deal_id: Optional[str] = None
    deal_name: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "message_id": self.message_id,
            "subject": self.subject,
            "from_email": self.from_email,
            "from_name": self.from_name,
            "category": self.category.value,
            "deal_id": self.deal_id,
            "deal_name": self.deal_name,
            "sentiment": self.sentiment.value,
            "thread_id": self.thread_id,
            "received_at": self.received_at.isoformat(),
            "processed_at": self.processed_at.isoformat(),
        }


ALERT_AGENT = "email-agent"
ALERT_TYPE_URGENT = "URGENT_EMAIL"
ALERT_PREVIEW_CHARS = 200


@dataclass(frozen=True)
class UrgentAlert:
    message_id: str
    subject: str
    sender: str
    preview: str
    created_at: datetime
    deal: Optional[DealAssociation] = None

    @property
    def title(self) -> str:
        return f"🔴 URGENT: {self.sender}"

    def to_row(self) -> Dict[str, Any]:
        return {
            "agent": ALERT_AGENT,
            "alert_type": ALERT_TYPE_URGENT,
            "title": self.title,
            "content": self.subject,
            "metadata": {
                "messageId": self.message_id,
                "dealId": self.deal.deal_id if self.deal else None,
                "dealName": self.deal.deal_name if self.deal else None,
                "sender": self.sender,
                "preview": self.preview,
            },
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class LogEntry:
    action: str
    created_at: datetime
    details: Dict[str, Any] = field(default_factory=dict)
    status: str = "info"
    agent: str = ALERT_AGENT

    def to_row(self) -> Dict[str, Any]:
        return {
            "agent": self.agent,
            "action": self.action,
            "status": self.status,
            "details": dict(self.details),
            "created_at": self.created_at.isoformat(),
        }
