"""Thread classification rules."""

from .engine import DecideFn, keyword_rule, unread_age_rule
from .keywords import KeywordGroup, load_keyword_groups, match_keywords
from .labels import SystemLabelPredicate, primary_category

__all__ = [
    "DecideFn",
    "KeywordGroup",
    "SystemLabelPredicate",
    "keyword_rule",
    "load_keyword_groups",
    "match_keywords",
    "primary_category",
    "unread_age_rule",
]
