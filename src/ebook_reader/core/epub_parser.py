"""EPUB parsing: archive to structured document."""

from __future__ import annotations

import asyncio
import logging

from ebook_reader.core.archive import ArchiveEntries, ArchiveSource, read_archive
from ebook_reader.core.container import CONTAINER_PATH, find_rootfile_path
from ebook_reader.core.content_processor import ContentProcessor
from ebook_reader.core.errors import ArchiveError, InvalidContainerError
from ebook_reader.core.package_document import (
    PackageDocument,
    find_cover,
    parse_metadata,
    parse_package_document,
)
from ebook_reader.core.resources import extract_images, lookup
from ebook_reader.core.toc_parser import parse_toc, resolve_chapter_title
from ebook_reader.models.epub import (
    EpubChapter,
    EpubDocument,
    EpubImage,
    EpubMetadata,
    TOCEntry,
)

log = logging.getLogger(__name__)


class EpubParser:
    """Parse EPUB containers and extract structure."""

    def __init__(self, processor: ContentProcessor | None = None):
        self.processor = processor or ContentProcessor()

    def parse(self, source: ArchiveSource) -> EpubDocument:
        """Parse an EPUB and return the complete document.

        Raises:
            ArchiveError: If the source is not a readable ZIP archive
            InvalidContainerError: If the package document cannot be located
                or parsed
        """
        entries = read_archive(source)
        package = self._read_package(entries)

        metadata = package.metadata
        cover = find_cover(
            entries.text(package.path) or "",
            package.manifest,
            entries,
            package.directory,
        )
        if cover is not None:
            data, media_type = cover
            metadata = metadata.model_copy(
                update={"cover_image": data, "cover_media_type": media_type}
            )

        images = extract_images(package.manifest, entries, package.directory)
        toc = parse_toc(package.manifest, entries, package.directory)
        chapters = self._get_chapters(package, entries, images, toc)

        if not chapters:
            log.info("No readable chapters in %s, substituting placeholder", package.path)
            chapters = [self._placeholder_chapter()]

        full_text = "\n\n".join(f"{ch.title}\n\n{ch.content}" for ch in chapters)
        html_content = self.processor.build_styled_document(metadata, chapters)

        log.info(
            "Parsed %r: %d chapters, %d images, %d TOC entries",
            metadata.title,
            len(chapters),
            len(images),
            len(toc),
        )
        return EpubDocument(
            metadata=metadata,
            chapters=chapters,
            images=images,
            full_text=full_text,
            html_content=html_content,
            table_of_contents=toc,
        )

    def get_metadata(self, source: ArchiveSource) -> EpubMetadata:
        """Read only the container descriptor and package document metadata."""
        entries = read_archive(
            source,
            include=lambda path: path == CONTAINER_PATH or path.lower().endswith(".opf"),
        )
        package_path = find_rootfile_path(entries.text(CONTAINER_PATH))
        opf = entries.text(package_path)
        if opf is None:
            raise InvalidContainerError(f"Package document {package_path} is missing")
        return parse_metadata(opf)

    def _read_package(self, entries: ArchiveEntries) -> PackageDocument:
        package_path = find_rootfile_path(entries.text(CONTAINER_PATH))
        opf = entries.text(package_path)
        if opf is None:
            raise InvalidContainerError(f"Package document {package_path} is missing")
        return parse_package_document(opf, package_path)

    def _get_chapters(
        self,
        package: PackageDocument,
        entries: ArchiveEntries,
        images: dict[str, EpubImage],
        toc: list[TOCEntry],
    ) -> list[EpubChapter]:
        """Normalize spine items in spine order, skipping unusable ones."""
        chapters = []

        for index, spine_item in enumerate(package.spine):
            item = package.manifest.get(spine_item.idref)
            if item is None:
                log.debug("Spine idref %s not in manifest", spine_item.idref)
                continue
            if "html" not in item.media_type.lower():
                log.debug("Skipping non-HTML spine item %s (%s)", item.id, item.media_type)
                continue

            raw = lookup(entries, package.directory, item.href)
            if raw is None:
                log.warning("Chapter resource %s missing from archive", item.href)
                continue

            text, markup, used_images = self.processor.normalize_chapter(raw, images)
            if not text.strip():
                continue

            chapters.append(
                EpubChapter(
                    id=spine_item.idref,
                    title=resolve_chapter_title(item.href, index, toc),
                    href=item.href,
                    content=text,
                    html_content=markup,
                    order=index,
                    word_count=len(text.split()),
                    images=used_images,
                )
            )

        return chapters

    def _placeholder_chapter(self) -> EpubChapter:
        return EpubChapter(
            id="placeholder",
            title="Chapter 1",
            content="No content available",
            html_content="<p>No content available</p>",
            order=0,
            word_count=3,
        )


def parse_document(source: ArchiveSource) -> EpubDocument:
    """Parse an EPUB from bytes, a path or a binary stream."""
    return EpubParser().parse(source)


async def parse_document_async(source: ArchiveSource) -> EpubDocument:
    """Run parse_document in a worker thread."""
    return await asyncio.to_thread(parse_document, source)


def extract_quick_metadata(source: ArchiveSource) -> tuple[str, str] | None:
    """Return (title, author) without reading chapters, or None if unreadable."""
    try:
        metadata = EpubParser().get_metadata(source)
    except (InvalidContainerError, ArchiveError) as e:
        log.debug("Quick metadata unavailable: %s", e)
        return None
    return metadata.title, metadata.author
