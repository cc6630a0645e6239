"""Read-only access to Dovecot keyword assignments in a maildir."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

LOGGER = logging.getLogger(__name__)

KEYWORDS_FILENAME: Final = "dovecot-keywords"
FLAG_SEPARATOR: Final = ":2,"
_MAX_KEYWORDS: Final = 26


class DovecotKeywords:
    """Resolve keyword letters in maildir filenames to keyword names."""

    def __init__(self, maildir: Path) -> None:
        self._maildir = maildir.expanduser()
        self._path = self._maildir / KEYWORDS_FILENAME
        self._keywords: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def keywords(self) -> dict[str, str]:
        """Return the ``{letter: name}`` map, loading it on first use."""

        if self._keywords is None:
            self._keywords = {
                self._index_to_letter(idx): name for idx, name in self._load().items()
            }
        return self._keywords

    def keywords_for(self, message_path: Path) -> list[str]:
        """Return keyword names set on a message through its filename flags."""

        _, separator, flags = message_path.name.partition(FLAG_SEPARATOR)
        if not separator:
            return []
        known = self.keywords()
        names: list[str] = []
        for flag in flags:
            # Upper-case flags are standard maildir flags (Seen, Replied, ...).
            if not flag.islower():
                continue
            name = known.get(flag)
            if name is None:
                LOGGER.debug("Keyword flag %r on %s is not registered", flag, message_path.name)
                continue
            names.append(name)
        return names

    def _load(self) -> dict[int, str]:
        """Parse the dovecot-keywords file into {index: name}."""

        if not self._path.exists():
            return {}

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Ignoring unreadable %s: %s", self._path, exc)
            return {}

        result: dict[int, str] = {}
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or " " not in line:
                continue
            idx_str, name = line.split(" ", 1)
            try:
                idx = int(idx_str)
            except ValueError:
                continue
            if 0 <= idx < _MAX_KEYWORDS:
                result[idx] = name
        return result

    @staticmethod
    def _index_to_letter(idx: int) -> str:
        return chr(ord("a") + idx)


def maildir_root(message_path: Path) -> Path | None:
    """Return the maildir that holds ``message_path`` when it sits in cur/ or new/."""

    parent = message_path.parent
    if parent.name not in ("cur", "new"):
        return None
    return parent.parent


__all__ = ["DovecotKeywords", "maildir_root"]
