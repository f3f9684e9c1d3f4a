"""Subject keyword matching.

A keyword group is a list of words. A subject matches a group when every word
appears somewhere in it (case-insensitive, any order). A subject matches the
rule set when it matches any group; the first matching group wins.

Example rule configuration (JSON)::

    [
        ["unsubscribe"],
        ["weekly", "digest"],
        ["monthly report"]
    ]

`["monthly report"]` only matches the exact phrase, while
`["weekly", "digest"]` matches both words in any order.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from inbox_sweeper.exceptions import ConfigurationError

KeywordGroup = list[str]

_GROUPS_ADAPTER = TypeAdapter(list[KeywordGroup])


def match_keywords(subject: str | None, groups: Sequence[Sequence[str]]) -> str | None:
    """Return the first group whose words all occur in the subject.

    Args:
        subject: Message subject. Empty or None never matches.
        groups: Keyword groups in declaration order.

    Returns:
        The matched group's words joined by a single space, or None.
    """

    if not subject or not groups:
        return None

    lowered = subject.lower()
    for group in groups:
        # An empty group would match everything with an empty label.
        if not group:
            continue
        if all(word.lower() in lowered for word in group):
            return " ".join(group)
    return None


def load_keyword_groups(path: Path) -> list[KeywordGroup]:
    """Load keyword groups from a JSON file.

    Raises:
        ConfigurationError: If the file is missing or not a list of lists of strings.
    """

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Keywords file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Keywords file is not valid JSON: {path}: {exc}") from exc

    try:
        groups = _GROUPS_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Keywords file must contain a list of lists of words: {path}"
        ) from exc

    return [[word.strip() for word in group if word.strip()] for group in groups]
