from __future__ import annotations

from pathlib import Path

from mailexpiry.dovecot import DovecotKeywords, maildir_root


def _maildir(tmp_path: Path, keywords: str | None) -> Path:
    maildir = tmp_path / "Maildir"
    for sub in ("cur", "new", "tmp"):
        (maildir / sub).mkdir(parents=True)
    if keywords is not None:
        (maildir / "dovecot-keywords").write_text(keywords, encoding="utf-8")
    return maildir


def test_keywords_for_resolves_lowercase_flags(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, "0 $Junk\n1 Newsletters\n2 Social\n")
    message = maildir / "cur" / "1700000000.M1P1.host:2,RSbc"

    assert DovecotKeywords(maildir).keywords_for(message) == ["Newsletters", "Social"]


def test_keywords_for_ignores_unknown_letters(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, "0 $Junk\n")
    message = maildir / "cur" / "1700000000.M1P1.host:2,Sz"

    assert DovecotKeywords(maildir).keywords_for(message) == []


def test_keywords_for_without_flag_suffix(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, "0 Social\n")

    assert DovecotKeywords(maildir).keywords_for(maildir / "new" / "1700000000.M1P1.host") == []


def test_missing_keywords_file(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, None)

    keywords = DovecotKeywords(maildir)

    assert keywords.keywords() == {}
    assert keywords.keywords_for(maildir / "cur" / "x:2,a") == []


def test_malformed_lines_are_skipped(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, "junk\nx Social\n30 Outside\n3 Promotions\n")

    assert DovecotKeywords(maildir).keywords() == {"d": "Promotions"}


def test_maildir_root_detection(tmp_path: Path) -> None:
    maildir = tmp_path / "Maildir"
    assert maildir_root(maildir / "cur" / "msg") == maildir
    assert maildir_root(maildir / "new" / "msg") == maildir
    assert maildir_root(tmp_path / "sample.eml") is None


def test_undecodable_keywords_file_is_ignored(tmp_path: Path) -> None:
    maildir = _maildir(tmp_path, None)
    (maildir / "dovecot-keywords").write_bytes(b"0 Pr\xffomo\n")

    keywords = DovecotKeywords(maildir)

    assert keywords.keywords() == {}
    assert keywords.keywords_for(maildir / "cur" / "x:2,a") == []
