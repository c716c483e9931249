"""Pattern-based extraction of elements and attributes from markup.

EPUB producers disagree on attribute order, quoting, whitespace and
namespace prefixes, so the package, container and navigation documents
are read with tolerant regular expressions instead of a validating XML
parser. Everything that inspects raw markup goes through the handful of
functions here, which keeps the matching rules in one place.

This is a best-effort reducer, not a validator: malformed input yields
fewer matches, never an exception.
"""

from __future__ import annotations

import re
from typing import Callable

# Matches an optional namespace prefix such as "dc:" or "opf:"
_PREFIX = r"(?:[\w.-]+:)?"

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES))
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def _open_tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{_PREFIX}{re.escape(tag)}\b[^>]*>", re.IGNORECASE)


def _attribute_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?<![\w:.-]){re.escape(name)}\s*=\s*([\"'])(.*?)\1",
        re.IGNORECASE | re.DOTALL,
    )


def decode_entities(text: str) -> str:
    """Decode the basic HTML entities."""
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_tags(markup: str) -> str:
    """Remove tags, decode entities and collapse whitespace."""
    return collapse_whitespace(decode_entities(_TAG_RE.sub(" ", markup)))


def attribute(tag: str, name: str) -> str | None:
    """Return the value of attribute ``name`` inside an opening tag."""
    match = _attribute_re(name).search(tag)
    if match is None:
        return None
    return decode_entities(match.group(2).strip())


def find_tags(markup: str, tag: str) -> list[str]:
    """Return every opening (or self-closing) ``tag`` element in document order."""
    return [m.group(0) for m in _open_tag_re(tag).finditer(markup)]


def element_text(markup: str, tag: str, start: int = 0) -> str | None:
    """Return the text of the first ``tag`` element at or after ``start``.

    Inner markup is stripped. Returns None when the element is missing or
    its text is blank.
    """
    pattern = re.compile(
        rf"<{_PREFIX}{re.escape(tag)}\b[^>]*>(.*?)</{_PREFIX}{re.escape(tag)}\s*>",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(markup, start)
    if match is None:
        return None
    text = strip_tags(match.group(1))
    return text or None


def element_block(markup: str, tag: str) -> str | None:
    """Return the full markup of the first ``tag`` element, tags included."""
    pattern = re.compile(
        rf"<{_PREFIX}{re.escape(tag)}\b[^>]*>.*?</{_PREFIX}{re.escape(tag)}\s*>",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(markup)
    return match.group(0) if match else None


def element_blocks(markup: str, tag: str) -> list[str]:
    """Return the full markup of every non-nested ``tag`` element."""
    pattern = re.compile(
        rf"<{_PREFIX}{re.escape(tag)}\b[^>]*>.*?</{_PREFIX}{re.escape(tag)}\s*>",
        re.IGNORECASE | re.DOTALL,
    )
    return [m.group(0) for m in pattern.finditer(markup)]


def links(markup: str) -> list[tuple[str, str]]:
    """Return (href, text) for every ``<a href>`` element in document order."""
    pattern = re.compile(
        rf"(<{_PREFIX}a\b[^>]*>)(.*?)</{_PREFIX}a\s*>",
        re.IGNORECASE | re.DOTALL,
    )
    result = []
    for match in pattern.finditer(markup):
        href = attribute(match.group(1), "href")
        if href is None:
            continue
        result.append((href, strip_tags(match.group(2))))
    return result


def tag_depths(markup: str, tag: str) -> list[tuple[int, str, int]]:
    """Return (offset, opening tag, depth) for every ``tag`` element.

    Depth is the number of ``tag`` elements still open at the offset,
    counted in one forward pass. Self-closing elements never stay open.
    """
    pattern = re.compile(
        rf"<(/?){_PREFIX}{re.escape(tag)}(?:\b[^>]*)?>", re.IGNORECASE
    )
    result = []
    depth = 0
    for match in pattern.finditer(markup):
        text = match.group(0)
        if match.group(1):
            depth = max(depth - 1, 0)
            continue
        result.append((match.start(), text, depth))
        if not text.endswith("/>"):
            depth += 1
    return result


def find_tag(markup: str, tag: str, start: int = 0) -> str | None:
    """Return the first opening ``tag`` element at or after ``start``."""
    match = _open_tag_re(tag).search(markup, start)
    return match.group(0) if match else None


def replace_attribute(
    markup: str,
    tag: str,
    name: str,
    replace: Callable[[str], str | None],
) -> str:
    """Rewrite attribute ``name`` on every ``tag`` element.

    ``replace`` receives the current value and returns the new one, or None
    to leave the element exactly as it was.
    """
    attr_re = _attribute_re(name)

    def rewrite_tag(tag_match: re.Match[str]) -> str:
        tag_text = tag_match.group(0)
        attr_match = attr_re.search(tag_text)
        if attr_match is None:
            return tag_text
        new_value = replace(decode_entities(attr_match.group(2)))
        if new_value is None:
            return tag_text
        start, end = attr_match.span(2)
        return f"{tag_text[:start]}{new_value}{tag_text[end:]}"

    return _open_tag_re(tag).sub(rewrite_tag, markup)
