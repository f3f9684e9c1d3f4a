"""Decision functions.

Each rule maps ThreadFacts to a Decision. Rules are stateless and never
combined: every search query is paired with exactly one rule.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from inbox_sweeper.models import Decision, Delete, Skip, ThreadFacts
from inbox_sweeper.rules.keywords import match_keywords

DecideFn = Callable[[ThreadFacts], Decision]

REASON_HAS_USER_LABELS = "Has user labels"
REASON_ALL_READ = "All read"
KEYWORD_REASON_PREFIX = "Keyword: "


def unread_age_rule(reason: str, require_unread: bool = True) -> DecideFn:
    """Build a rule for threads already selected by an age query.

    A custom label always wins over age and read state.
    """

    def decide(facts: ThreadFacts) -> Decision:
        if facts.custom_labels:
            return Skip(reason=REASON_HAS_USER_LABELS)
        if require_unread and facts.unread_count == 0:
            return Skip(reason=REASON_ALL_READ)
        return Delete(reason=reason)

    return decide


def keyword_rule(groups: Sequence[Sequence[str]]) -> DecideFn:
    """Build a rule deleting threads whose subject matches a keyword group."""

    def decide(facts: ThreadFacts) -> Decision:
        match = match_keywords(facts.subject, groups)
        if match is None:
            return Skip()
        return Delete(reason=KEYWORD_REASON_PREFIX + match)

    return decide
