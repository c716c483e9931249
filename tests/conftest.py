from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from ebook_reader.models.pagination import LayoutConfiguration

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

# Smallest valid PNG header is enough; nothing decodes these bytes
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16


def xhtml(body: str, title: str = "Chapter") -> str:
    return f"""<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
  <head><title>{title}</title></head>
  <body>
{body}
  </body>
</html>
"""


def package_xml(
    manifest: list[tuple[str, str, str]],
    spine: list[str],
    metadata: str = "<dc:title>Sample Book</dc:title><dc:creator>Sample Author</dc:creator>",
) -> str:
    """Build a package document from (id, href, media-type) items and spine idrefs."""
    items = "\n".join(
        f'    <item id="{item_id}" href="{href}" media-type="{media_type}"/>'
        for item_id, href, media_type in manifest
    )
    itemrefs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package version="3.0" unique-identifier="BookId" xmlns="http://www.idpf.org/2007/opf">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    {metadata}
  </metadata>
  <manifest>
{items}
  </manifest>
  <spine toc="ncx">
{itemrefs}
  </spine>
</package>
"""


def build_epub(files: dict[str, str | bytes], container: str | None = CONTAINER_XML) -> bytes:
    """Zip archive bytes with a mimetype entry, the container and ``files``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip")
        if container is not None:
            zf.writestr("META-INF/container.xml", container)
        for path, data in files.items():
            zf.writestr(path, data)
    return buffer.getvalue()


SAMPLE_NCX = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
    <navPoint id="np1" playOrder="1">
      <navLabel><text>The Beginning</text></navLabel>
      <content src="text/ch1.xhtml"/>
    </navPoint>
    <navPoint id="np2" playOrder="2">
      <navLabel><text>The Middle</text></navLabel>
      <content src="text/ch2.xhtml#start"/>
      <navPoint id="np2a" playOrder="3">
        <navLabel><text>A Detour</text></navLabel>
        <content src="text/ch2.xhtml#detour"/>
      </navPoint>
    </navPoint>
    <navPoint id="np3" playOrder="4">
      <navLabel><text>part0003</text></navLabel>
      <content src="text/ch3.xhtml"/>
    </navPoint>
  </navMap>
</ncx>
"""


@pytest.fixture
def sample_files() -> dict[str, str | bytes]:
    """Files of a small EPUB 2 book with an NCX, an image and a cover."""
    metadata = (
        "<dc:title>Sample Book</dc:title>"
        "<dc:creator>Sample Author</dc:creator>"
        "<dc:creator>Second Author</dc:creator>"
        "<dc:description>A short &amp; simple book.</dc:description>"
        "<dc:language>en</dc:language>"
        "<dc:publisher>Example Press</dc:publisher>"
        '<meta name="cover" content="cover-img"/>'
    )
    manifest = [
        ("ncx", "toc.ncx", "application/x-dtbncx+xml"),
        ("ch3", "text/ch3.xhtml", "application/xhtml+xml"),
        ("ch2", "text/ch2.xhtml", "application/xhtml+xml"),
        ("ch1", "text/ch1.xhtml", "application/xhtml+xml"),
        ("blank", "text/blank.xhtml", "application/xhtml+xml"),
        ("font", "fonts/serif.otf", "font/otf"),
        ("fig", "images/fig.png", "image/png"),
        ("cover-img", "images/front.jpg", "image/jpeg"),
        ("css", "style.css", "text/css"),
    ]
    return {
        "OEBPS/content.opf": package_xml(
            manifest, ["ch1", "blank", "ch2", "font", "ch3"], metadata=metadata
        ),
        "OEBPS/toc.ncx": SAMPLE_NCX,
        "OEBPS/text/ch1.xhtml": xhtml(
            '<h1>One</h1>\n<p>It was a dark &amp; stormy night.</p>\n'
            '<img src="../images/fig.png" alt="figure"/>\n'
            '<img src="images/fig.png" alt="figure"/>'
        ),
        "OEBPS/text/blank.xhtml": xhtml("   "),
        "OEBPS/text/ch2.xhtml": xhtml(
            "<p>The second chapter.</p>\n<script>var hidden = 1;</script>"
        ),
        "OEBPS/text/ch3.xhtml": xhtml("<p>Third and final chapter.</p>"),
        "OEBPS/fonts/serif.otf": b"OTTO",
        "OEBPS/images/fig.png": PNG_BYTES,
        "OEBPS/images/front.jpg": JPEG_BYTES,
        "OEBPS/style.css": "p { margin: 0; }",
    }


@pytest.fixture
def sample_epub(sample_files: dict[str, str | bytes]) -> bytes:
    return build_epub(sample_files)


@pytest.fixture
def epub_file(tmp_path: Path, sample_epub: bytes) -> Path:
    path = tmp_path / "Sample Book - Sample Author.epub"
    path.write_bytes(sample_epub)
    return path


@pytest.fixture
def make_epub() -> Callable[..., bytes]:
    return build_epub


@pytest.fixture
def small_layout() -> LayoutConfiguration:
    """100x100 viewport, 10 lines per page, 6 units per character."""
    return LayoutConfiguration(
        screen_width=100,
        screen_height=100,
        font_size=10.0,
        line_height=10.0,
        margin_horizontal=0,
        margin_vertical=0,
        density=1.0,
    )
