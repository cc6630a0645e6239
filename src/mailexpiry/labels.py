"""Provider-native label identifiers and header label parsing."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final


class GmailLabel:
    """System label identifiers assigned by Gmail."""

    INBOX: Final = "INBOX"
    UNREAD: Final = "UNREAD"
    STARRED: Final = "STARRED"
    IMPORTANT: Final = "IMPORTANT"
    SPAM: Final = "SPAM"
    TRASH: Final = "TRASH"
    PERSONAL: Final = "CATEGORY_PERSONAL"
    SOCIAL: Final = "CATEGORY_SOCIAL"
    PROMOTIONS: Final = "CATEGORY_PROMOTIONS"
    UPDATES: Final = "CATEGORY_UPDATES"
    FORUMS: Final = "CATEGORY_FORUMS"


# Gmail Takeout writes display names into X-Gmail-Labels instead of ids.
_TAKEOUT_NAMES: Final[dict[str, str]] = {
    "inbox": GmailLabel.INBOX,
    "unread": GmailLabel.UNREAD,
    "starred": GmailLabel.STARRED,
    "important": GmailLabel.IMPORTANT,
    "spam": GmailLabel.SPAM,
    "trash": GmailLabel.TRASH,
    "category personal": GmailLabel.PERSONAL,
    "category social": GmailLabel.SOCIAL,
    "category promotions": GmailLabel.PROMOTIONS,
    "category updates": GmailLabel.UPDATES,
    "category forums": GmailLabel.FORUMS,
}


def normalize_label(name: str) -> str:
    """Map a Takeout label display name to its identifier, else return it stripped."""

    stripped = name.strip()
    return _TAKEOUT_NAMES.get(stripped.lower(), stripped)


def split_label_header(value: str | None, separators: str = ",") -> list[str]:
    """Split an ``X-Gmail-Labels``/``X-Keywords`` style header into identifiers."""

    if not value:
        return []
    tokens = [value]
    for separator in separators:
        tokens = [piece for token in tokens for piece in token.split(separator)]
    return [normalize_label(token) for token in tokens if token.strip()]


def merge_labels(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate label groups, dropping duplicates while keeping first-seen order."""

    seen: set[str] = set()
    merged: list[str] = []
    for group in groups:
        for label in group:
            if label in seen:
                continue
            seen.add(label)
            merged.append(label)
    return tuple(merged)


__all__ = ["GmailLabel", "normalize_label", "split_label_header", "merge_labels"]
