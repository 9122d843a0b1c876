"""
Keyword rules used in demo mode.

Rules are tried in declaration order. A rule applies when its keywords match
AND a document title satisfies its filter; when the keywords match but no
document does, evaluation continues with the next rule.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from supportbot.docs import DocumentSet
from supportbot.models.chat import Turn
from supportbot.resolver.base import FALLBACK_REPLY, FALLBACK_TOKENS, ReplyStrategy, Resolution
from supportbot.logging import logger


@dataclass(frozen=True)
class KeywordRule:
    name: str
    # Every group must match; a group matches when any of its substrings is present
    keyword_groups: Tuple[Tuple[str, ...], ...]
    title_filters: Tuple[str, ...]
    tokens: int

    def matches(self, lowered_message: str) -> bool:
        return all(
            any(keyword in lowered_message for keyword in group)
            for group in self.keyword_groups
        )


RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(
        name="password_reset",
        keyword_groups=(("password",), ("reset", "change")),
        title_filters=("password", "reset"),
        tokens=45,
    ),
    KeywordRule(
        name="refund",
        keyword_groups=(("refund", "money back"),),
        title_filters=("refund",),
        tokens=38,
    ),
    KeywordRule(
        name="subscription",
        keyword_groups=(("subscription", "plan", "pricing"),),
        title_filters=("subscription",),
        tokens=52,
    ),
    KeywordRule(
        name="account_setup",
        keyword_groups=(("account",), ("setup", "create", "register")),
        title_filters=("account",),
        tokens=41,
    ),
    KeywordRule(
        name="payment",
        keyword_groups=(("payment", "pay", "credit card"),),
        title_filters=("payment",),
        tokens=44,
    ),
    KeywordRule(
        name="api_integration",
        keyword_groups=(("api", "integration", "develop"),),
        title_filters=("api",),
        tokens=48,
    ),
)


class RuleMatchingStrategy(ReplyStrategy):
    name = "demo"

    def __init__(self, documents: DocumentSet, rules: Sequence[KeywordRule] = RULES):
        self.documents = documents
        self.rules = tuple(rules)

    def match(self, user_message: str) -> Optional[Tuple[KeywordRule, str]]:
        """Return the winning rule and the document content it selected, if any."""
        lowered = user_message.lower()
        for rule in self.rules:
            if not rule.matches(lowered):
                continue
            doc = self.documents.find_by_title(*rule.title_filters)
            if doc is None:
                logger.debug(f"Rule {rule.name} matched but no document title fits {rule.title_filters}")
                continue
            return rule, doc.content
        return None

    def resolve(self, user_message: str, history: Sequence[Turn]) -> Resolution:
        hit = self.match(user_message)
        if hit is None:
            return Resolution(reply=FALLBACK_REPLY, tokens_used=FALLBACK_TOKENS)
        rule, content = hit
        logger.info(f"Demo reply via rule {rule.name}")
        return Resolution(reply=content, tokens_used=rule.tokens)
