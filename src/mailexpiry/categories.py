"""Expirable-category detection and expiration duration lookup.

Classification is a fixed priority cascade:

1. provider-native category labels on the message,
2. keywords inside labels applied earlier in the same pass (these are not
   yet visible in ``message.label_ids``),
3. calendar attachments,
4. a ``List-Unsubscribe`` header.

The first rule that matches decides the category.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from .config import ConfigError, parse_expiration_settings
from .labels import GmailLabel
from .types import ExpirableCategory, ExpirationSettings, ParsedMessage

LOGGER = logging.getLogger(__name__)

FALLBACK_EXPIRATION_DAYS: Final = 30

CATEGORY_DEFAULTS: Final = MappingProxyType(
    {
        ExpirableCategory.NOTIFICATION: 7,
        ExpirableCategory.NEWSLETTER: 30,
        ExpirableCategory.MARKETING: 14,
        ExpirableCategory.SOCIAL: 7,
        ExpirableCategory.CALENDAR: 1,
    }
)

# Checked in order; when a message carries several, the earliest entry wins.
NATIVE_CATEGORY_LABELS: Final[tuple[tuple[str, ExpirableCategory], ...]] = (
    (GmailLabel.SOCIAL, ExpirableCategory.SOCIAL),
    (GmailLabel.PROMOTIONS, ExpirableCategory.MARKETING),
    (GmailLabel.UPDATES, ExpirableCategory.NOTIFICATION),
    (GmailLabel.FORUMS, ExpirableCategory.NEWSLETTER),
)

# Substring keywords per category, in per-label evaluation order.
KEYWORD_RULES: Final[tuple[tuple[ExpirableCategory, tuple[str, ...]], ...]] = (
    (ExpirableCategory.SOCIAL, ("social", "twitter", "facebook", "linkedin")),
    (ExpirableCategory.MARKETING, ("promo", "marketing", "sale", "offer")),
    (
        ExpirableCategory.NOTIFICATION,
        ("notification", "alert", "update", "shipping", "delivery", "tracking"),
    ),
    (ExpirableCategory.NEWSLETTER, ("newsletter", "digest", "weekly", "daily")),
    (ExpirableCategory.CALENDAR, ("calendar", "event", "meeting", "invite")),
)

CALENDAR_FILE_SUFFIXES: Final = (".ics", ".ical")
UNSUBSCRIBE_HEADER: Final = "list-unsubscribe"


@dataclass(frozen=True)
class ExpirationDecision:
    """Category plus the number of days after which the message expires."""

    category: ExpirableCategory | None
    days: int


def detect_expirable_category(
    message: ParsedMessage,
    applied_labels: Sequence[str] | None = None,
) -> ExpirableCategory | None:
    """Return the expirable category of ``message`` or ``None``.

    Args:
        message: The message to inspect. Missing label, attachment and header
            collections count as "no signal".
        applied_labels: Labels just applied by an upstream rule pass that the
            message object does not reflect yet. Compared case-insensitively.
    """

    category = _category_from_native_labels(message.label_ids or ())
    if category is not None:
        LOGGER.debug("Native label mapped message %s to %s", message.message_id, category.value)
        return category

    category = _category_from_applied_labels(applied_labels or ())
    if category is not None:
        LOGGER.debug("Applied label mapped message %s to %s", message.message_id, category.value)
        return category

    if _has_calendar_attachment(message):
        LOGGER.debug("Calendar attachment found on message %s", message.message_id)
        return ExpirableCategory.CALENDAR

    headers = message.headers or {}
    if headers.get(UNSUBSCRIBE_HEADER):
        LOGGER.debug("List-Unsubscribe header found on message %s", message.message_id)
        return ExpirableCategory.NEWSLETTER

    return None


def default_expiration_days(
    category: ExpirableCategory | str | None,
    user_settings: ExpirationSettings | Mapping[str, int | None] | None = None,
) -> int:
    """Return the number of days after which a message of ``category`` expires.

    User overrides take precedence over ``CATEGORY_DEFAULTS``. Overrides may
    also come as a sparse mapping such as ``{"marketingDays": 3}``; an invalid
    mapping is ignored. A missing or unrecognised category resolves to
    ``FALLBACK_EXPIRATION_DAYS``.
    """

    if not category:
        return FALLBACK_EXPIRATION_DAYS

    try:
        resolved = ExpirableCategory(category)
    except ValueError:
        LOGGER.debug("Unknown expirable category %r; using fallback", category)
        return FALLBACK_EXPIRATION_DAYS

    if isinstance(user_settings, Mapping):
        try:
            user_settings = parse_expiration_settings(user_settings)
        except ConfigError as exc:
            LOGGER.warning("Ignoring invalid expiration settings: %s", exc)
            user_settings = None

    if user_settings is not None:
        override = user_settings.override_for(resolved)
        if override is not None:
            return override
    return CATEGORY_DEFAULTS[resolved]


def classify_expiration(
    message: ParsedMessage,
    applied_labels: Sequence[str] | None = None,
    user_settings: ExpirationSettings | Mapping[str, int | None] | None = None,
) -> ExpirationDecision:
    """Detect the category of ``message`` and resolve its expiration days."""

    category = detect_expirable_category(message, applied_labels)
    return ExpirationDecision(
        category=category,
        days=default_expiration_days(category, user_settings),
    )


def _category_from_native_labels(label_ids: Sequence[str]) -> ExpirableCategory | None:
    present = set(label_ids)
    for label, category in NATIVE_CATEGORY_LABELS:
        if label in present:
            return category
    return None


def _category_from_applied_labels(applied_labels: Sequence[str]) -> ExpirableCategory | None:
    for label in applied_labels:
        lowered = label.lower()
        for category, keywords in KEYWORD_RULES:
            if any(keyword in lowered for keyword in keywords):
                return category
    return None


def _has_calendar_attachment(message: ParsedMessage) -> bool:
    for attachment in message.attachments or ():
        mime_type = attachment.mime_type or ""
        if "calendar" in mime_type.lower():
            return True
        # Suffix match is case-sensitive: "INVITE.ICS" does not count.
        if attachment.filename and attachment.filename.endswith(CALENDAR_FILE_SUFFIXES):
            return True
    return False


__all__ = [
    "CATEGORY_DEFAULTS",
    "FALLBACK_EXPIRATION_DAYS",
    "KEYWORD_RULES",
    "NATIVE_CATEGORY_LABELS",
    "ExpirationDecision",
    "detect_expirable_category",
    "default_expiration_days",
    "classify_expiration",
]
