"""System versus user label detection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

CATEGORY_PREFIX = "CATEGORY_"

DEFAULT_SYSTEM_LABEL_PREFIXES: tuple[str, ...] = (CATEGORY_PREFIX,)
DEFAULT_SYSTEM_LABEL_NAMES: frozenset[str] = frozenset(
    {"INBOX", "IMPORTANT", "UNREAD", "SENT", "DRAFT", "TRASH", "SPAM"}
)


@dataclass(frozen=True)
class SystemLabelPredicate:
    """Decides whether a label name is reserved by the mail backend.

    Anything that is not a system label is a custom label, i.e. one the user
    applied by hand.
    """

    prefixes: tuple[str, ...] = DEFAULT_SYSTEM_LABEL_PREFIXES
    names: frozenset[str] = field(default=DEFAULT_SYSTEM_LABEL_NAMES)

    @classmethod
    def from_lists(cls, prefixes: Iterable[str], names: Iterable[str]) -> SystemLabelPredicate:
        return cls(prefixes=tuple(prefixes), names=frozenset(names))

    def __call__(self, label: str) -> bool:
        return label in self.names or any(label.startswith(p) for p in self.prefixes)

    def custom_labels(self, labels: Sequence[str]) -> list[str]:
        return [label for label in labels if not self(label)]


def primary_category(labels: Sequence[str]) -> str:
    """Return the first category label (e.g. CATEGORY_PROMOTIONS) or ''."""

    return next((label for label in labels if label.startswith(CATEGORY_PREFIX)), "")
