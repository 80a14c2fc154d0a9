"""URI result parser implementation."""

from __future__ import annotations

import re

from scanresult.results import URIParsedResult

URL_PREFIX = "URL:"

# Optional port, then a path, a query or the end of the text.
PATTERN_END = r"(:\d{1,5})?(/|\?|$)"
URL_WITH_PROTOCOL_REGEX = re.compile(
    r"[a-zA-Z0-9]{2,}:(/)*"  # protocol
    r"[a-zA-Z0-9\-]+(\.[a-zA-Z0-9\-]+)*"  # host name elements
    + PATTERN_END
)
URL_WITHOUT_PROTOCOL_REGEX = re.compile(
    r"([a-zA-Z0-9\-]+\.)+[a-zA-Z0-9\-]{2,}"  # host name elements
    + PATTERN_END
)


def parse(raw_text: str) -> URIParsedResult | None:
    # The odd "URL:" scheme is handled here directly.
    if raw_text.startswith(URL_PREFIX):
        raw_text = raw_text[len(URL_PREFIX) :]
    raw_text = raw_text.strip()
    if not is_basically_valid_uri(raw_text):
        return None
    return URIParsedResult.build(raw_text)


def is_basically_valid_uri(uri: str) -> bool:
    """Heuristically check that ``uri`` starts with something URL-shaped.

    Only matches at index 0 count; no whitespace is trimmed here.
    """
    if URL_WITH_PROTOCOL_REGEX.match(uri):
        return True
    return URL_WITHOUT_PROTOCOL_REGEX.match(uri) is not None
