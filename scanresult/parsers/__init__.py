"""Parser registry dispatching raw text to the first matching result parser."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from time import perf_counter

from scanresult.results import ParsedResult, TextParsedResult

from . import uri, vevent

ResultParser = Callable[[str], ParsedResult | None]

# Priority order: the first parser returning a result wins.
PARSERS: tuple[tuple[str, ResultParser], ...] = (
    ("calendar", vevent.parse),
    ("uri", uri.parse),
)

DEFAULT_PARSER_NAMES: tuple[str, ...] = tuple(name for name, _ in PARSERS)


def select_parsers(names: Sequence[str] | None = None) -> list[tuple[str, ResultParser]]:
    """Return registered parsers in the requested order (registry order by default)."""
    if names is None:
        return list(PARSERS)
    registry = dict(PARSERS)
    unknown = [name for name in names if name not in registry]
    if unknown:
        raise ValueError(f"unknown result parser(s): {', '.join(unknown)}")
    return [(name, registry[name]) for name in names]


def iter_parsers(
    raw_text: str,
    names: Sequence[str] | None = None,
) -> Iterator[tuple[str, ParsedResult | None, float]]:
    """Run each parser and yield its outcome with latency metrics.

    Stops after the first parser that returns a result.
    """

    for parser_name, parser_func in select_parsers(names):
        start = perf_counter()
        result = parser_func(raw_text)
        latency_ms = (perf_counter() - start) * 1000
        yield parser_name, result, latency_ms
        if result is not None:
            return


def parse_result(raw_text: str, names: Sequence[str] | None = None) -> ParsedResult:
    """Classify ``raw_text``, falling back to a plain text result."""
    for _, result, _ in iter_parsers(raw_text, names):
        if result is not None:
            return result
    return TextParsedResult(text=raw_text)
