"""Build :class:`ParsedMessage` values from RFC822 input."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from email import policy
from email.header import decode_header, make_header
from email.message import Message
from email.parser import BytesParser
from pathlib import Path

from .dovecot import DovecotKeywords, maildir_root
from .labels import merge_labels, split_label_header
from .types import Attachment, ParsedMessage

LOGGER = logging.getLogger(__name__)

GMAIL_LABELS_HEADER = "x-gmail-labels"
KEYWORDS_HEADER = "x-keywords"


class MessageError(RuntimeError):
    """Raised when a message file cannot be read."""


def parse_message(
    raw_message: bytes | str | Message,
    *,
    label_ids: Iterable[str] = (),
) -> ParsedMessage:
    """Parse raw email data into a ParsedMessage.

    Malformed input yields a message without headers or attachments that
    still carries ``label_ids``.
    """

    message = _parse(raw_message)
    if message is None:
        return ParsedMessage(label_ids=merge_labels(label_ids))

    headers = _collect_headers(message)
    header_labels = split_label_header(headers.get(GMAIL_LABELS_HEADER))
    keyword_labels = split_label_header(headers.get(KEYWORDS_HEADER), separators=", ")
    return ParsedMessage(
        label_ids=merge_labels(label_ids, header_labels, keyword_labels),
        attachments=tuple(_collect_attachments(message)),
        headers=headers,
        message_id=headers.get("message-id"),
        subject=headers.get("subject"),
    )


def read_message(path: Path | str, *, label_ids: Iterable[str] = ()) -> ParsedMessage:
    """Parse a message file, adding Dovecot keywords when it lives in a maildir."""

    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise MessageError(f"Message file does not exist: {file_path}")

    labels = list(label_ids)
    root = maildir_root(file_path)
    if root is not None:
        labels.extend(DovecotKeywords(root).keywords_for(file_path))

    try:
        raw = file_path.read_bytes()
    except OSError as exc:
        raise MessageError(f"Unable to read message file {file_path}: {exc}") from exc
    return parse_message(raw, label_ids=labels)


def _parse(raw_message: bytes | str | Message) -> Message | None:
    if isinstance(raw_message, Message):
        message = raw_message
    else:
        if isinstance(raw_message, bytes):
            data = raw_message
        else:
            data = raw_message.encode("utf-8", errors="ignore")
        try:
            message = BytesParser(policy=policy.default).parsebytes(data)
        except Exception as exc:
            LOGGER.debug("Failed to parse message: %s", exc)
            return None
    if not tuple(message.keys()):
        return None
    return message


def _collect_headers(message: Message) -> dict[str, str]:
    # raw_items() skips the policy's structured header parsing, which raises on
    # malformed values such as "Message-ID: <[".
    headers: dict[str, str] = {}
    for name, value in message.raw_items():
        key = name.lower()
        if key in headers:
            continue
        headers[key] = _decode_header_value(_unfold(str(value)))
    return headers


def _collect_attachments(message: Message) -> Iterable[Attachment]:
    for part in message.walk():
        if part.is_multipart():
            continue
        try:
            filename = part.get_filename()
            disposition = (part.get_content_disposition() or "").lower()
            content_type = part.get_content_type()
        except Exception as exc:
            LOGGER.debug("Skipping unreadable MIME part: %s", exc)
            continue
        if filename or disposition == "attachment" or content_type == "text/calendar":
            yield Attachment(mime_type=content_type, filename=filename)


def _unfold(value: str) -> str:
    return value.replace("\r\n", "").replace("\n", "")


def _decode_header_value(value: str) -> str:
    try:
        header = make_header(decode_header(value))
        decoded = str(header)
    except Exception:
        decoded = value
    return decoded.strip()


__all__ = ["MessageError", "parse_message", "read_message"]
