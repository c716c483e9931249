"""Parse the OPF package document: metadata, manifest, spine and cover."""

import logging
import mimetypes
from collections.abc import Mapping

from pydantic import BaseModel, Field

from ebook_reader.core import patterns
from ebook_reader.core.errors import InvalidContainerError
from ebook_reader.core.resources import lookup, package_directory, resolve_href
from ebook_reader.models.epub import EpubMetadata, ManifestItem, SpineItem

log = logging.getLogger(__name__)

# Probed in order, relative to the package directory and then to the
# archive root, when the metadata declares no cover.
COVER_CANDIDATES = [
    "cover.jpg",
    "cover.jpeg",
    "cover.png",
    "images/cover.jpg",
    "images/cover.jpeg",
    "images/cover.png",
    "Images/cover.jpg",
    "Images/cover.jpeg",
    "Images/cover.png",
    "OEBPS/images/cover.jpg",
    "OEBPS/Images/cover.jpg",
    "OPS/images/cover.jpg",
]


class PackageDocument(BaseModel):
    """Parsed contents of the package document."""

    path: str
    directory: str
    metadata: EpubMetadata
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    spine: list[SpineItem] = Field(default_factory=list)


def parse_metadata(opf: str) -> EpubMetadata:
    """Extract Dublin Core metadata; the first occurrence of each field wins."""
    return EpubMetadata(
        title=patterns.element_text(opf, "title") or "Unknown Title",
        author=patterns.element_text(opf, "creator") or "Unknown Author",
        description=patterns.element_text(opf, "description"),
        language=patterns.element_text(opf, "language"),
        publisher=patterns.element_text(opf, "publisher"),
    )


def parse_manifest(opf: str) -> dict[str, ManifestItem]:
    """Extract manifest items keyed by id; later duplicates replace earlier ones."""
    scope = patterns.element_block(opf, "manifest") or opf
    items: dict[str, ManifestItem] = {}

    for tag in patterns.find_tags(scope, "item"):
        item_id = patterns.attribute(tag, "id")
        href = patterns.attribute(tag, "href")
        if not item_id or not href:
            continue
        items[item_id] = ManifestItem(
            id=item_id,
            href=href,
            media_type=patterns.attribute(tag, "media-type") or "",
        )

    return items


def parse_spine(opf: str) -> list[SpineItem]:
    """Extract spine itemrefs in document order."""
    scope = patterns.element_block(opf, "spine") or opf
    spine = []

    for tag in patterns.find_tags(scope, "itemref"):
        idref = patterns.attribute(tag, "idref")
        if not idref:
            continue
        linear = (patterns.attribute(tag, "linear") or "yes").lower() != "no"
        spine.append(SpineItem(idref=idref, linear=linear))

    return spine


def _declared_cover_id(opf: str) -> str | None:
    for meta in patterns.find_tags(opf, "meta"):
        if (patterns.attribute(meta, "name") or "").lower() == "cover":
            return patterns.attribute(meta, "content")
    return None


def _guess_media_type(path: str) -> str:
    media_type, _ = mimetypes.guess_type(path)
    return media_type or "image/jpeg"


def find_cover(
    opf: str,
    manifest: Mapping[str, ManifestItem],
    entries: Mapping[str, bytes],
    base_dir: str,
) -> tuple[bytes, str] | None:
    """Locate cover art, returning (bytes, media type).

    Tries, in order: the manifest item named by ``<meta name="cover">``,
    the conventional filenames in COVER_CANDIDATES, then the first image
    whose href contains "cover".
    """
    cover_id = _declared_cover_id(opf)
    if cover_id and cover_id in manifest:
        item = manifest[cover_id]
        data = lookup(entries, base_dir, item.href)
        if data is not None:
            log.debug("Cover from metadata declaration: %s", item.href)
            return data, item.media_type or _guess_media_type(item.href)

    for candidate in COVER_CANDIDATES:
        for path in (resolve_href(base_dir, candidate), candidate):
            data = entries.get(path)
            if data is not None:
                log.debug("Cover from conventional path: %s", path)
                return data, _guess_media_type(path)

    for item in manifest.values():
        if item.media_type.startswith("image/") and "cover" in item.href.lower():
            data = lookup(entries, base_dir, item.href)
            if data is not None:
                log.debug("Cover from manifest search: %s", item.href)
                return data, item.media_type

    return None


def parse_package_document(opf: str, path: str) -> PackageDocument:
    """Parse metadata, manifest and spine from package document text.

    Raises:
        InvalidContainerError: If the text has no package root element
    """
    if not patterns.find_tags(opf, "package"):
        raise InvalidContainerError(f"{path} is not a package document")

    return PackageDocument(
        path=path,
        directory=package_directory(path),
        metadata=parse_metadata(opf),
        manifest=parse_manifest(opf),
        spine=parse_spine(opf),
    )
