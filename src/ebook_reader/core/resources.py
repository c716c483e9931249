"""Resolve manifest hrefs to archive entries and collect images."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import unquote

from ebook_reader.models.epub import EpubImage, ManifestItem

log = logging.getLogger(__name__)


def package_directory(package_path: str) -> str:
    """Return the directory containing the package document ("" at the root)."""
    if "/" not in package_path:
        return ""
    return package_path.rsplit("/", 1)[0]


def resolve_href(base_dir: str, href: str) -> str:
    """Resolve a manifest href against the package document's directory."""
    if not base_dir:
        return href
    return f"{base_dir}/{href}"


def lookup(entries: Mapping[str, bytes], base_dir: str, href: str) -> bytes | None:
    """Return the archive bytes an href points to, or None.

    Percent-encoded hrefs are retried in decoded form, since archive member
    names are stored unencoded.
    """
    path = resolve_href(base_dir, href)
    data = entries.get(path)
    if data is None:
        decoded = unquote(path)
        if decoded != path:
            data = entries.get(decoded)
    return data


def extract_images(
    manifest: Mapping[str, ManifestItem],
    entries: Mapping[str, bytes],
    base_dir: str,
) -> dict[str, EpubImage]:
    """Collect every image resource present in the archive.

    The result is keyed by the manifest href as written, which is also the
    string chapter markup uses to reference the image.
    """
    images: dict[str, EpubImage] = {}
    for item in manifest.values():
        if not item.media_type.startswith("image/"):
            continue
        data = lookup(entries, base_dir, item.href)
        if data is None:
            log.debug("Image %s not found in archive", item.href)
            continue
        images[item.href] = EpubImage(
            id=item.id,
            href=item.href,
            media_type=item.media_type,
            data=data,
        )
    return images
