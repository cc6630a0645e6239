"""Core immutable data structures used throughout mailexpiry."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum


class ExpirableCategory(str, Enum):
    """Categories of mail that lose their value after a while."""

    NOTIFICATION = "NOTIFICATION"
    NEWSLETTER = "NEWSLETTER"
    MARKETING = "MARKETING"
    SOCIAL = "SOCIAL"
    CALENDAR = "CALENDAR"


@dataclass(frozen=True)
class Attachment:
    """Attachment descriptor; both fields may be missing on odd MIME parts."""

    mime_type: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class ParsedMessage:
    """Provider-agnostic view of a message, limited to what classification reads.

    Attributes:
        label_ids: Provider label identifiers (e.g. ``CATEGORY_SOCIAL``).
        attachments: Attachment descriptors, ``None`` when unknown.
        headers: Lowercase header names mapped to their values, ``None`` when unknown.
        message_id: Message-ID header, informational only.
        subject: Subject header, informational only.
    """

    label_ids: tuple[str, ...] | None = ()
    attachments: tuple[Attachment, ...] | None = None
    headers: Mapping[str, str] | None = None
    message_id: str | None = None
    subject: str | None = None


@dataclass(frozen=True)
class ExpirationSettings:
    """Sparse per-user overrides of the default expiration durations.

    ``None`` means "unset" and falls back to the built-in default.
    """

    notification_days: int | None = None
    newsletter_days: int | None = None
    marketing_days: int | None = None
    social_days: int | None = None
    calendar_days: int | None = None

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{item.name} must be an integer number of days.")
            if value <= 0:
                raise ValueError(f"{item.name} must be positive, got {value}.")

    @staticmethod
    def field_for(category: ExpirableCategory) -> str:
        """Return the settings field name that overrides ``category``."""

        return f"{category.value.lower()}_days"

    def override_for(self, category: ExpirableCategory) -> int | None:
        """Return the configured override for ``category`` or ``None``."""

        return getattr(self, self.field_for(category), None)


__all__ = [
    "ExpirableCategory",
    "Attachment",
    "ParsedMessage",
    "ExpirationSettings",
]
