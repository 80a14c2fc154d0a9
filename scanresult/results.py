"""Typed parsed-result records produced by the result parsers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from scanresult import dates

_PORT_ONLY = re.compile(r"\d+")


class ParsedResultType(str, Enum):
    """Tag identifying which kind of payload a result describes."""

    CALENDAR = "calendar"
    URI = "uri"
    TEXT = "text"


def maybe_append(value: str | None, parts: list[str]) -> None:
    if value:
        parts.append(value)


class ParsedResult(ABC):
    """Base for every classification outcome."""

    type: ClassVar[ParsedResultType]

    @property
    @abstractmethod
    def display_result(self) -> str:
        """Present fields joined one per line."""

    def asdict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        payload["type"] = self.type.value
        return payload

    def __str__(self) -> str:
        return self.display_result


@dataclass(frozen=True, slots=True)
class TextParsedResult(ParsedResult):
    type: ClassVar[ParsedResultType] = ParsedResultType.TEXT

    text: str
    language: str | None = None

    @property
    def display_result(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class URIParsedResult(ParsedResult):
    type: ClassVar[ParsedResultType] = ParsedResultType.URI

    uri: str
    title: str | None = None

    @classmethod
    def build(cls, uri: str, title: str | None = None) -> URIParsedResult:
        return cls(uri=massage_uri(uri), title=title)

    @property
    def display_result(self) -> str:
        parts: list[str] = []
        maybe_append(self.title, parts)
        maybe_append(self.uri, parts)
        return "\n".join(parts)

    @property
    def is_possibly_malicious_uri(self) -> bool:
        """True when the authority section embeds user info (``user:pass@host``)."""
        remainder = self.uri.split("://", 1)[-1]
        authority = remainder.split("/", 1)[0]
        return "@" in authority


def massage_uri(uri: str) -> str:
    """Trim the URI and prepend ``http://`` when it carries no scheme."""
    uri = uri.strip()
    protocol_end = uri.find(":")
    if protocol_end < 0 or _is_colon_followed_by_port(uri, protocol_end):
        uri = f"http://{uri}"
    return uri


def _is_colon_followed_by_port(uri: str, colon: int) -> bool:
    next_slash = uri.find("/", colon + 1)
    if next_slash < 0:
        next_slash = len(uri)
    return _PORT_ONLY.fullmatch(uri, colon + 1, next_slash) is not None


@dataclass(frozen=True, slots=True)
class CalendarParsedResult(ParsedResult):
    """A calendar event extracted from an RFC 2445 style record.

    ``start_all_day`` and ``end_all_day`` are derived from the original
    tokens, since a floating midnight is otherwise indistinguishable from
    a whole-day date.
    """

    type: ClassVar[ParsedResultType] = ParsedResultType.CALENDAR

    summary: str | None
    start: datetime
    start_all_day: bool
    end: datetime | None = None
    end_all_day: bool = False
    location: str | None = None
    attendee: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def build(
        cls,
        summary: str | None,
        start: str,
        end: str | None = None,
        location: str | None = None,
        attendee: str | None = None,
        description: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> CalendarParsedResult:
        """Parse the date tokens and build the event.

        Raises:
            ValueError: if ``start``, or ``end`` when given, is not an
                RFC 2445 DATE or DATE-TIME token.
        """
        try:
            start_value = dates.parse_date(start)
            end_value = None if end is None else dates.parse_date(end)
        except dates.DateFormatError as exc:
            raise ValueError(f"invalid calendar date: {exc}") from exc
        return cls(
            summary=summary,
            start=start_value,
            start_all_day=dates.is_all_day(start),
            end=end_value,
            end_all_day=end is not None and dates.is_all_day(end),
            location=location,
            attendee=attendee,
            description=description,
            latitude=latitude,
            longitude=longitude,
        )

    @property
    def display_result(self) -> str:
        parts: list[str] = []
        maybe_append(self.summary, parts)
        maybe_append(dates.format_date(self.start_all_day, self.start), parts)
        maybe_append(dates.format_date(self.end_all_day, self.end), parts)
        maybe_append(self.location, parts)
        maybe_append(self.attendee, parts)
        maybe_append(self.description, parts)
        return "\n".join(parts)
