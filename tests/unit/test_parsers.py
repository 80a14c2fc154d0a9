from __future__ import annotations

from datetime import datetime

import pytest

from scanresult import dates
from scanresult.dates import DateFormatError
from scanresult.parsers import common, parse_result, select_parsers, uri, vevent
from scanresult.results import (
    CalendarParsedResult,
    ParsedResultType,
    TextParsedResult,
    URIParsedResult,
)

VEVENT = (
    "BEGIN:VCALENDAR\r\n"
    "BEGIN:VEVENT\r\n"
    "SUMMARY:Quarterly review\r\n"
    "DTSTART:20240115T140000\r\n"
    "DTEND:20240115T153000\r\n"
    "LOCATION:Room 12\r\n"
    "ATTENDEE;CN=Sam:MAILTO:sam@example.com\r\n"
    "DESCRIPTION:Bring the slide\r\n"
    " s and the numbers\r\n"
    "GEO:52.52;13.405\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("http://example.com", True),
        ("https://example.com:8443/path?q=1", True),
        ("ftp:example.org", True),
        ("example.com/path", True),
        ("www.example.co.uk?x=1", True),
        ("example.com:8080", True),
        ("not a url at all", False),
        ("  http://example.com", False),
        ("example.c", False),
        ("h:example.com", False),
        ("example", False),
    ],
)
def test_uri_matcher_is_anchored_at_start(text: str, expected: bool) -> None:
    assert uri.is_basically_valid_uri(text) is expected


def test_uri_parser_trims_before_matching() -> None:
    result = uri.parse("  http://example.com  ")

    assert isinstance(result, URIParsedResult)
    assert result.uri == "http://example.com"
    assert result.title is None


def test_uri_parser_strips_url_marker() -> None:
    result = uri.parse("URL:http://example.com")

    assert result is not None
    assert result.uri == "http://example.com"


def test_uri_parser_returns_none_for_plain_text() -> None:
    assert uri.parse("hello world, nothing here") is None


def test_uri_parser_marker_is_case_sensitive() -> None:
    assert uri.parse("url:not a link") is None


def test_vevent_parser_extracts_all_fields() -> None:
    result = vevent.parse(VEVENT)

    assert isinstance(result, CalendarParsedResult)
    assert result.summary == "Quarterly review"
    assert result.start == datetime(2024, 1, 15, 14, 0)
    assert result.end == datetime(2024, 1, 15, 15, 30)
    assert result.start_all_day is False
    assert result.location == "Room 12"
    assert result.attendee == "sam@example.com"
    assert result.description == "Bring the slides and the numbers"
    assert result.latitude == pytest.approx(52.52)
    assert result.longitude == pytest.approx(13.405)


def test_vevent_parser_accepts_date_only_start_with_params() -> None:
    result = vevent.parse("BEGIN:VEVENT\nDTSTART;VALUE=DATE:20240301\nEND:VEVENT")

    assert result is not None
    assert result.start_all_day is True
    assert result.end is None
    assert result.latitude is None
    assert result.longitude is None


def test_vevent_parser_ignores_other_payloads() -> None:
    assert vevent.parse("DTSTART:20240101") is None


def test_vevent_parser_requires_start() -> None:
    assert vevent.parse("BEGIN:VEVENT\nSUMMARY:No date\nEND:VEVENT") is None


def test_vevent_parser_rejects_malformed_start() -> None:
    assert vevent.parse("BEGIN:VEVENT\nDTSTART:2024-01-01\nEND:VEVENT") is None


def test_vevent_parser_rejects_malformed_end() -> None:
    assert vevent.parse("BEGIN:VEVENT\nDTSTART:20240101\nDTEND:20240101T12\nEND:VEVENT") is None


@pytest.mark.parametrize("geo", ["52.52", "north;east"])
def test_vevent_parser_rejects_malformed_geo(geo: str) -> None:
    assert vevent.parse(f"BEGIN:VEVENT\nDTSTART:20240101\nGEO:{geo}\nEND:VEVENT") is None


def test_match_prefixed_field_treats_empty_as_absent() -> None:
    assert common.match_prefixed_field("SUMMARY", "SUMMARY:   \nLOCATION:x") is None
    assert common.match_prefixed_field("location", "SUMMARY:a\nLOCATION: x ") == "x"


def test_dispatcher_prefers_calendar_over_uri() -> None:
    result = parse_result(VEVENT)

    assert result.type is ParsedResultType.CALENDAR


def test_dispatcher_returns_uri_result() -> None:
    result = parse_result("URL:example.com/menu")

    assert result.type is ParsedResultType.URI
    assert result.display_result == "http://example.com/menu"


def test_dispatcher_falls_back_to_text() -> None:
    result = parse_result("Call me maybe")

    assert isinstance(result, TextParsedResult)
    assert result.text == "Call me maybe"


def test_dispatcher_honours_explicit_order() -> None:
    assert parse_result("http://example.com", names=["calendar"]).type is ParsedResultType.TEXT


def test_select_parsers_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="sms"):
        select_parsers(["uri", "sms"])


def test_vevent_parser_ignores_fields_of_sibling_components() -> None:
    text = (
        "BEGIN:VCALENDAR\n"
        "BEGIN:VTIMEZONE\n"
        "TZID:Europe/Berlin\n"
        "BEGIN:STANDARD\n"
        "DTSTART:19701025T030000\n"
        "END:STANDARD\n"
        "END:VTIMEZONE\n"
        "BEGIN:VEVENT\n"
        "SUMMARY:Kickoff\n"
        "DTSTART;TZID=Europe/Berlin:20240101T090000\n"
        "END:VEVENT\n"
        "BEGIN:VTODO\n"
        "DTEND:19991231\n"
        "END:VTODO\n"
        "END:VCALENDAR\n"
    )

    result = vevent.parse(text)

    assert result is not None
    assert result.start == datetime(2024, 1, 1, 9, 0)
    assert result.end is None


def test_vevent_parser_reads_to_end_when_block_is_unterminated() -> None:
    result = vevent.parse("BEGIN:VEVENT\nSUMMARY:Open\nDTSTART:20240101")

    assert result is not None
    assert result.summary == "Open"


def test_vevent_parser_unescapes_text_fields() -> None:
    text = (
        "BEGIN:VEVENT\n"
        "SUMMARY:Lunch\\, then demo\n"
        "DTSTART:20240101\n"
        "LOCATION:Cafe\\; upstairs\n"
        "DESCRIPTION:Line one\\nLine two \\\\o/\n"
        "END:VEVENT"
    )

    result = vevent.parse(text)

    assert result is not None
    assert result.summary == "Lunch, then demo"
    assert result.location == "Cafe; upstairs"
    assert result.description == "Line one\nLine two \\o/"


def test_dispatcher_falls_back_when_utc_start_cannot_be_localised(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def out_of_range(token: str) -> datetime:
        raise DateFormatError(f"no date format: {token!r} (date value out of range)")

    monkeypatch.setattr(dates, "parse_date", out_of_range)

    result = parse_result("BEGIN:VEVENT\nDTSTART:99991231T230000Z\nEND:VEVENT")

    assert isinstance(result, TextParsedResult)


def test_field_patterns_are_compiled_once_per_name() -> None:
    assert common._field_pattern("SUMMARY") is common._field_pattern("SUMMARY")
