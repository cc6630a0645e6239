"""Rule-based detection of expirable mail and its expiration duration."""

from importlib import metadata

from .categories import (
    CATEGORY_DEFAULTS,
    ExpirationDecision,
    classify_expiration,
    default_expiration_days,
    detect_expirable_category,
)
from .types import Attachment, ExpirableCategory, ExpirationSettings, ParsedMessage


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("mailexpiry")
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout without install
        return "0.0.0"


__version__ = _discover_version()

__all__ = [
    "__version__",
    "CATEGORY_DEFAULTS",
    "Attachment",
    "ExpirableCategory",
    "ExpirationDecision",
    "ExpirationSettings",
    "ParsedMessage",
    "classify_expiration",
    "default_expiration_days",
    "detect_expirable_category",
]
