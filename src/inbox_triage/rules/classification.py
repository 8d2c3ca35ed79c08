from __future__ import annotations

from typing import Optional, Sequence

from inbox_triage.models import Category, DealAssociation, NormalizedEmail
from inbox_triage.rules.BaseRule import BaseRule, RuleMatch
from inbox_triage.rules.core import MailItem
from inbox_triage.rules.rules import (
    ActiveDealRule,
    ActiveDealUrgentRule,
    DirectRecipientRule,
    FallbackRule,
    JunkRule,
    UrgencyKeywordRule,
)


def default_rules(owner_addresses: Sequence[str] = ()) -> tuple[BaseRule, ...]:
    """
    The classification cascade. Order matters: the first matching rule decides
    the category, so junk detection overrides every deal or urgency signal.
    """
    return (
        JunkRule(),
        ActiveDealUrgentRule(),
        ActiveDealRule(),
        UrgencyKeywordRule(),
        DirectRecipientRule(owner_addresses),
        FallbackRule(),
    )


DEFAULT_RULES = default_rules()


def evaluate(
    email: NormalizedEmail,
    deal: Optional[DealAssociation] = None,
    rules: Sequence[BaseRule] = DEFAULT_RULES,
) -> RuleMatch:
    """Run the cascade and return the first match."""
    mail = MailItem(email=email, deal=deal)

    for rule in rules:
        result = rule.match_info(mail)
        if result.matched:
            return result

    # Only reachable with a custom rule list lacking a catch-all.
    return RuleMatch(matched=False, category=Category.FYI, rule_name="none", reason="No rule matched")


def classify(
    email: NormalizedEmail,
    deal: Optional[DealAssociation] = None,
    rules: Sequence[BaseRule] = DEFAULT_RULES,
) -> Category:
    return evaluate(email, deal, rules).category
