from __future__ import annotations

from datetime import datetime
from typing import List

from inbox_triage.models import (
    ALERT_PREVIEW_CHARS,
    Category,
    ClassificationRecord,
    EmailAnalysis,
    NormalizedEmail,
    UrgentAlert,
)
from inbox_triage.rules.core import Action, ActionType


def classification_record(
    email: NormalizedEmail, analysis: EmailAnalysis, processed_at: datetime
) -> ClassificationRecord:
    deal = analysis.deal
    return ClassificationRecord(
        message_id=email.message_id,
        subject=email.subject,
        from_email=email.sender_address,
        from_name=email.sender_display,
        category=analysis.category,
        sentiment=analysis.sentiment,
        received_at=email.received_at,
        processed_at=processed_at,
        thread_id=email.thread_id,
        deal_id=deal.deal_id if deal else None,
        deal_name=deal.deal_name if deal else None,
    )


def urgent_alert(email: NormalizedEmail, analysis: EmailAnalysis, created_at: datetime) -> UrgentAlert:
    return UrgentAlert(
        message_id=email.message_id,
        subject=email.subject,
        sender=email.from_header,
        preview=email.body[:ALERT_PREVIEW_CHARS],
        created_at=created_at,
        deal=analysis.deal,
    )


def actions_from_analysis(
    email: NormalizedEmail, analysis: EmailAnalysis, now: datetime
) -> List[Action]:
    # Policy layer decides side effects based on analysis output.
    # The classification is always stored first; an URGENT result adds exactly one alert.
    actions: List[Action] = [
        Action(
            type=ActionType.UPSERT_CLASSIFICATION,
            message_id=email.message_id,
            payload=classification_record(email, analysis, now),
            reason=analysis.reason or analysis.category.value,
        )
    ]

    if analysis.category == Category.URGENT:
        actions.append(
            Action(
                type=ActionType.EMIT_ALERT,
                message_id=email.message_id,
                payload=urgent_alert(email, analysis, now),
                reason=analysis.reason,
            )
        )

    return actions
