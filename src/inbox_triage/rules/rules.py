from __future__ import annotations

from typing import Sequence

from inbox_triage.models import Category
from inbox_triage.rules.BaseRule import BaseRule
from inbox_triage.rules.core import MailItem
from inbox_triage.rules.keywords import JUNK_INDICATORS, URGENCY_WORDS


class JunkRule(BaseRule):
    name = "junk"
    category = Category.JUNK

    def match(self, mail: MailItem) -> tuple[bool, str]:
        hit = self.first_match(self.sender(mail), JUNK_INDICATORS)
        if hit:
            return True, f"junk indicator in sender: {hit}"
        hit = self.first_match(self.subject(mail), JUNK_INDICATORS)
        if hit:
            return True, f"junk indicator in subject: {hit}"
        return False, ""


class ActiveDealUrgentRule(BaseRule):
    name = "active_deal_urgent"
    category = Category.URGENT

    def match(self, mail: MailItem) -> tuple[bool, str]:
        if not self.has_active_deal(mail):
            return False, ""
        hit = self.first_match(self.content(mail), URGENCY_WORDS)
        if not hit:
            return False, ""
        return True, f"active deal ({mail.deal.stage_name}) with urgency keyword: {hit}"


class ActiveDealRule(BaseRule):
    name = "active_deal"
    category = Category.REPLY_NEEDED

    def match(self, mail: MailItem) -> tuple[bool, str]:
        if self.has_active_deal(mail):
            return True, f"active deal ({mail.deal.stage_name})"
        return False, ""


class UrgencyKeywordRule(BaseRule):
    name = "urgency_keyword"
    category = Category.REPLY_NEEDED

    def match(self, mail: MailItem) -> tuple[bool, str]:
        hit = self.first_match(self.content(mail), URGENCY_WORDS)
        if hit:
            return True, f"urgency keyword: {hit}"
        return False, ""


class DirectRecipientRule(BaseRule):
    """Mail addressed straight to the owner. Lands on FYI, same as the fallback."""

    name = "direct_recipient"
    category = Category.FYI

    def __init__(self, addresses: Sequence[str] = ()) -> None:
        self.addresses = tuple(a.lower() for a in addresses if a)

    def match(self, mail: MailItem) -> tuple[bool, str]:
        hit = self.first_match(self.recipient(mail), self.addresses)
        if hit:
            return True, f"addressed to {hit}"
        return False, ""


class FallbackRule(BaseRule):
    name = "fallback"
    category = Category.FYI

    def match(self, mail: MailItem) -> tuple[bool, str]:
        return True, "no other rule matched"
