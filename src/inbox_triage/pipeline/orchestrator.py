from typing import Optional, Sequence

from inbox_triage.analysis.sentiment import analyze_sentiment
from inbox_triage.models import DealAssociation, EmailAnalysis, NormalizedEmail
from inbox_triage.rules.BaseRule import BaseRule
from inbox_triage.rules.classification import DEFAULT_RULES, evaluate


def analyze_email(
    email: NormalizedEmail,
    deal: Optional[DealAssociation] = None,
    rules: Sequence[BaseRule] = DEFAULT_RULES,
) -> EmailAnalysis:
    match = evaluate(email, deal, rules)

    return EmailAnalysis(
        category=match.category,
        sentiment=analyze_sentiment(email.body),
        rule_name=match.rule_name,
        reason=match.reason,
        deal=deal,
    )
