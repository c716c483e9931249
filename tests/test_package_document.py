from __future__ import annotations

import pytest

from ebook_reader.core.errors import InvalidContainerError
from ebook_reader.core.package_document import (
    find_cover,
    parse_manifest,
    parse_metadata,
    parse_package_document,
    parse_spine,
)
from ebook_reader.models.epub import ManifestItem

from conftest import JPEG_BYTES, PNG_BYTES, package_xml


def test_metadata_first_occurrence_wins(sample_files: dict[str, str | bytes]) -> None:
    metadata = parse_metadata(str(sample_files["OEBPS/content.opf"]))
    assert metadata.title == "Sample Book"
    assert metadata.author == "Sample Author"
    assert metadata.description == "A short & simple book."
    assert metadata.language == "en"
    assert metadata.publisher == "Example Press"


def test_metadata_defaults_when_missing() -> None:
    metadata = parse_metadata("<package><metadata></metadata></package>")
    assert metadata.title == "Unknown Title"
    assert metadata.author == "Unknown Author"
    assert metadata.description is None


def test_manifest_duplicate_id_overwrites() -> None:
    opf = package_xml(
        [("a", "one.xhtml", "application/xhtml+xml"), ("a", "two.xhtml", "text/html")],
        ["a"],
    )
    manifest = parse_manifest(opf)
    assert list(manifest) == ["a"]
    assert manifest["a"].href == "two.xhtml"
    assert manifest["a"].media_type == "text/html"


def test_manifest_tolerates_attribute_order() -> None:
    opf = """<package><manifest>
      <item media-type="application/xhtml+xml" href="c1.xhtml" id="c1" />
      <opf:item href='c2.xhtml' id='c2' media-type='application/xhtml+xml'/>
      <item id="broken"/>
    </manifest></package>"""
    manifest = parse_manifest(opf)
    assert list(manifest) == ["c1", "c2"]
    assert manifest["c2"].href == "c2.xhtml"


def test_spine_preserves_document_order() -> None:
    opf = package_xml(
        [(i, f"{i}.xhtml", "application/xhtml+xml") for i in ("a", "b", "c")],
        ["c", "a", "b"],
    )
    assert [item.idref for item in parse_spine(opf)] == ["c", "a", "b"]


def test_spine_linear_flag() -> None:
    opf = '<package><spine><itemref idref="a"/><itemref idref="b" linear="no"/></spine></package>'
    assert [item.linear for item in parse_spine(opf)] == [True, False]


def test_parse_package_document_sets_directory(sample_files: dict[str, str | bytes]) -> None:
    package = parse_package_document(str(sample_files["OEBPS/content.opf"]), "OEBPS/content.opf")
    assert package.directory == "OEBPS"
    assert [item.idref for item in package.spine] == ["ch1", "blank", "ch2", "font", "ch3"]
    assert package.manifest["fig"].media_type == "image/png"


def test_parse_package_document_requires_package_element() -> None:
    with pytest.raises(InvalidContainerError):
        parse_package_document("<html><body>not a package</body></html>", "content.opf")


def test_cover_from_metadata_declaration(sample_files: dict[str, str | bytes]) -> None:
    opf = str(sample_files["OEBPS/content.opf"])
    entries = {k: v for k, v in sample_files.items() if isinstance(v, bytes)}
    cover = find_cover(opf, parse_manifest(opf), entries, "OEBPS")
    assert cover == (JPEG_BYTES, "image/jpeg")


def test_cover_from_conventional_path_relative_then_root() -> None:
    opf = "<package><metadata/></package>"
    entries = {"OEBPS/images/cover.png": PNG_BYTES, "cover.jpg": JPEG_BYTES}
    assert find_cover(opf, {}, entries, "OEBPS") == (JPEG_BYTES, "image/jpeg")
    assert find_cover(opf, {}, {"OEBPS/images/cover.png": PNG_BYTES}, "OEBPS") == (
        PNG_BYTES,
        "image/png",
    )


def test_cover_from_manifest_substring_search() -> None:
    manifest = {
        "i1": ManifestItem(id="i1", href="art/figure.png", media_type="image/png"),
        "i2": ManifestItem(id="i2", href="art/MyCover_front.png", media_type="image/png"),
    }
    entries = {"art/figure.png": b"fig", "art/MyCover_front.png": PNG_BYTES}
    assert find_cover("<package/>", manifest, entries, "") == (PNG_BYTES, "image/png")


def test_no_cover_found() -> None:
    assert find_cover("<package/>", {}, {}, "OEBPS") is None
