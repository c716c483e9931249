"""Table of contents from an NCX or EPUB 3 navigation document."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Literal

from ebook_reader.core import patterns
from ebook_reader.core.archive import decode_text
from ebook_reader.core.resources import lookup
from ebook_reader.models.epub import ManifestItem, TOCEntry

log = logging.getLogger(__name__)

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"

# Labels like "part0003" carry no information; split tools emit them.
_PLACEHOLDER_TITLE_RE = re.compile(r"^\s*part\s*\d+\s*$", re.IGNORECASE)

TocKind = Literal["ncx", "nav"]


def strip_fragment(href: str) -> str:
    """Drop a ``#fragment`` suffix from an href."""
    return href.split("#", 1)[0]


def find_toc_source(
    manifest: Mapping[str, ManifestItem],
) -> tuple[TocKind, ManifestItem] | None:
    """Choose the TOC resource; an NCX document wins over a nav document."""
    for item in manifest.values():
        if item.media_type.lower() == NCX_MEDIA_TYPE:
            return "ncx", item

    for item in manifest.values():
        if "xhtml" in item.media_type.lower() and "nav" in item.id.lower():
            return "nav", item

    return None


def parse_ncx(ncx: str) -> list[TOCEntry]:
    """Parse navPoint entries in document order, nested points included."""
    entries: list[TOCEntry] = []

    for position, _, depth in patterns.tag_depths(ncx, "navPoint"):
        label = patterns.element_text(ncx, "text", start=position) or ""
        content_tag = patterns.find_tag(ncx, "content", start=position)
        if content_tag is None:
            continue
        src = patterns.attribute(content_tag, "src")
        if src is None:
            continue
        entries.append(
            TOCEntry(
                title=label,
                href=src,
                index=len(entries),
                level=depth,
            )
        )

    return entries


def _toc_nav_block(nav: str) -> str:
    """Return the ``<nav epub:type="toc">`` element, or the whole document."""
    for block in patterns.element_blocks(nav, "nav"):
        opening = patterns.find_tags(block, "nav")[0]
        nav_type = patterns.attribute(opening, "epub:type") or ""
        if "toc" in nav_type.split():
            return block
    return nav


def parse_nav(nav: str) -> list[TOCEntry]:
    """Parse the links of a navigation document in document order."""
    scope = _toc_nav_block(nav)
    entries = []

    for href, text in patterns.links(scope):
        entries.append(TOCEntry(title=text, href=href, index=len(entries)))

    return entries


def parse_toc(
    manifest: Mapping[str, ManifestItem],
    entries: Mapping[str, bytes],
    base_dir: str,
) -> list[TOCEntry]:
    """Read the table of contents, or return [] when no TOC resource exists."""
    source = find_toc_source(manifest)
    if source is None:
        return []

    kind, item = source
    raw = lookup(entries, base_dir, item.href)
    if raw is None:
        log.debug("TOC resource %s not found in archive", item.href)
        return []

    text = decode_text(raw)
    toc = parse_ncx(text) if kind == "ncx" else parse_nav(text)
    log.debug("Parsed %d TOC entries from %s", len(toc), item.href)
    return toc


def resolve_chapter_title(href: str, index: int, toc: list[TOCEntry]) -> str:
    """Return the TOC title for a chapter href, or "Chapter N" when none fits."""
    target = strip_fragment(href)

    for entry in toc:
        if strip_fragment(entry.href) == target:
            title = entry.title.strip()
            if title and not _PLACEHOLDER_TITLE_RE.match(title):
                return title
            break

    return f"Chapter {index + 1}"
