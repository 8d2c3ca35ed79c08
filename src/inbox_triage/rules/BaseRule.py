from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from inbox_triage.models import Category
from inbox_triage.rules import keywords
from inbox_triage.rules.core import MailItem


@dataclass(frozen=True)
class RuleMatch:
    """Result of a rule match, with the category the rule assigns."""
    matched: bool
    category: Category
    rule_name: str
    reason: str = ""


class BaseRule(ABC):
    """
    Base class for classification rules.

    Each rule maps to exactly one category. Rules are evaluated in the order
    they appear in the rule list and the first match wins, so a rule only
    decides whether it applies; it never needs to know about the others.
    """

    # Human-/debug-friendly unique name
    name: str = "base_rule"

    # Category assigned when the rule matches
    category: Category = Category.FYI

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, category={self.category.value})"

    # --- Helpers (None-safe, case-insensitive) ---

    def sender(self, mail: MailItem) -> str:
        return keywords.norm(mail.email.from_header)

    def subject(self, mail: MailItem) -> str:
        return keywords.norm(mail.email.subject)

    def content(self, mail: MailItem) -> str:
        """Subject and body joined, lowercased."""
        return keywords.norm(f"{mail.email.subject} {mail.email.body}")

    def recipient(self, mail: MailItem) -> str:
        return keywords.norm(mail.email.recipient)

    def has_active_deal(self, mail: MailItem) -> bool:
        return mail.deal is not None and mail.deal.is_active

    def contains_any(self, text: str | None, needles: Sequence[str]) -> bool:
        return keywords.contains_any(text, needles)

    def first_match(self, text: str | None, needles: Sequence[str]) -> str:
        """The first needle found in text, or "" if none."""
        t = keywords.norm(text)
        return next((n for n in needles if n.lower() in t), "")

    # --- Rule API ---

    @abstractmethod
    def match(self, mail: MailItem) -> tuple[bool, str]:
        """Return (matched, reason)."""
        raise NotImplementedError

    def match_info(self, mail: MailItem) -> RuleMatch:
        matched, reason = self.match(mail)
        return RuleMatch(matched=matched, category=self.category, rule_name=self.name, reason=reason)
