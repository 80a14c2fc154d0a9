"""Shared helpers for result parser implementations."""

from __future__ import annotations

import re
from functools import lru_cache

_FOLDED_LINE = re.compile(r"\r?\n[ \t]")
_MAILTO_PREFIX = re.compile(r"^mailto:", re.IGNORECASE)
_TEXT_ESCAPE = re.compile(r"\\([\\;,nN])")


def unfold_lines(raw_text: str) -> str:
    """Join RFC 2445 folded content lines (a break followed by a space or tab)."""
    return _FOLDED_LINE.sub("", raw_text)


def extract_block(raw_text: str, begin: str, end: str) -> str | None:
    """Return the text from ``begin`` up to the next ``end`` (or the end of the text)."""
    start = raw_text.find(begin)
    if start < 0:
        return None
    stop = raw_text.find(end, start + len(begin))
    if stop < 0:
        return raw_text[start:]
    return raw_text[start:stop]


@lru_cache(maxsize=32)
def _field_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(name)}(?:;[^:\r\n]*)?:(?P<value>[^\r\n]*)",
        re.IGNORECASE | re.MULTILINE,
    )


def match_prefixed_field(name: str, raw_text: str) -> str | None:
    """Return the trimmed value of the first ``NAME[;params]:value`` line.

    Empty values count as absent.
    """
    match = _field_pattern(name).search(raw_text)
    if not match:
        return None
    value = match.group("value").strip()
    return value or None


def unescape_text(value: str | None) -> str | None:
    """Undo RFC 2445 TEXT escapes of commas, semicolons, newlines and backslashes."""
    if value is None:
        return None
    return _TEXT_ESCAPE.sub(lambda m: "\n" if m.group(1) in "nN" else m.group(1), value)


def strip_mailto(value: str | None) -> str | None:
    if value is None:
        return None
    return _MAILTO_PREFIX.sub("", value) or None


def truncate_preview(value: str, *, limit: int = 24) -> str:
    if len(value) <= limit:
        return value
    return f"{value[:limit]}..."
