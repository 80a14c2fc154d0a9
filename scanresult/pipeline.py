"""Classification pipeline wrapping the parser registry."""

from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any

import structlog

from scanresult import metrics
from scanresult.parsers import iter_parsers
from scanresult.results import ParsedResult, TextParsedResult
from scanresult.settings import Settings

LOGGER = structlog.get_logger(__name__)

FALLBACK_PARSER = "text"


@dataclass(slots=True)
class ClassifyRequest:
    text: str


@dataclass(slots=True)
class ClassificationResult:
    result: ParsedResult
    parser: str
    latency_ms: float
    version: str

    def asdict(self) -> dict[str, Any]:
        return {
            "type": self.result.type.value,
            "display": self.result.display_result,
            "fields": self.result.asdict(),
            "parser": self.parser,
            "latency_ms": self.latency_ms,
            "version": self.version,
        }


def classify(request: ClassifyRequest, *, settings: Settings) -> ClassificationResult:
    """Run the configured parsers in order and return the first result."""

    start = perf_counter()
    LOGGER.info("pipeline.start", length=len(request.text))

    result: ParsedResult | None = None
    matched_parser = FALLBACK_PARSER
    for parser_name, parser_result, parser_latency in iter_parsers(
        request.text, settings.parser_names
    ):
        metrics.observe_parser(parser=parser_name, latency_ms=parser_latency)
        if parser_result is not None:
            result = parser_result
            matched_parser = parser_name

    if result is None:
        result = TextParsedResult(text=request.text)

    latency_ms = (perf_counter() - start) * 1000
    metrics.observe_classification(latency_ms=latency_ms, result_type=result.type.value)

    LOGGER.info(
        "pipeline.end",
        parser=matched_parser,
        result_type=result.type.value,
        latency_ms=latency_ms,
    )

    return ClassificationResult(
        result=result,
        parser=matched_parser,
        latency_ms=latency_ms,
        version=settings.version,
    )
