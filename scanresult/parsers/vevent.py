"""Calendar event (VEVENT) result parser implementation."""

from __future__ import annotations

import structlog

from scanresult.results import CalendarParsedResult

from . import common

LOGGER = structlog.get_logger(__name__)

VEVENT_BEGIN = "BEGIN:VEVENT"
VEVENT_END = "END:VEVENT"


def parse(raw_text: str) -> CalendarParsedResult | None:
    # Fields of sibling components (VTIMEZONE, VALARM, ...) must not leak in.
    block = common.extract_block(raw_text, VEVENT_BEGIN, VEVENT_END)
    if block is None:
        return None
    text = common.unfold_lines(block)

    start = common.match_prefixed_field("DTSTART", text)
    if start is None:
        return None

    geo = common.match_prefixed_field("GEO", text)
    try:
        latitude, longitude = _parse_geo(geo)
    except ValueError:
        LOGGER.info("calendar.invalid_geo", geo=common.truncate_preview(geo or ""))
        return None

    try:
        return CalendarParsedResult.build(
            summary=_text_field("SUMMARY", text),
            start=start,
            end=common.match_prefixed_field("DTEND", text),
            location=_text_field("LOCATION", text),
            attendee=common.strip_mailto(common.match_prefixed_field("ATTENDEE", text)),
            description=_text_field("DESCRIPTION", text),
            latitude=latitude,
            longitude=longitude,
        )
    except ValueError as exc:
        LOGGER.info("calendar.invalid_date", start=common.truncate_preview(start), error=str(exc))
        return None


def _text_field(name: str, text: str) -> str | None:
    return common.unescape_text(common.match_prefixed_field(name, text))


def _parse_geo(geo: str | None) -> tuple[float | None, float | None]:
    """Split ``lat;lon``; raises ValueError when malformed."""
    if geo is None:
        return None, None
    latitude, separator, longitude = geo.partition(";")
    if not separator:
        raise ValueError(f"GEO value has no separator: {geo!r}")
    return float(latitude), float(longitude)
