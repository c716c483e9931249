"""Reduce chapter markup to plain text and assemble the styled view."""

from __future__ import annotations

import base64
import html
import re
import warnings
from collections.abc import Mapping
from string import Template

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from ebook_reader.config import ReadingTheme
from ebook_reader.core import patterns
from ebook_reader.models.epub import EpubChapter, EpubImage, EpubMetadata

# Suppress XML parsing warnings - EPUB files often use XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

# Line-oriented Markdown reductions, applied in order
_MARKDOWN_RULES = [
    (re.compile(r"^#{1,6}[ \t]+", re.MULTILINE), ""),  # headers
    (re.compile(r"!\[([^\]]*)\]\([^)]*\)"), r"\1"),  # images
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),  # links
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),  # bold
    (re.compile(r"__(.*?)__"), r"\1"),
    (re.compile(r"(?<![\w*])\*(?!\s)(.*?)\*"), r"\1"),  # italic
    (re.compile(r"(?<!\w)_(?!\s)(.*?)_(?!\w)"), r"\1"),
    (re.compile(r"~~(.*?)~~"), r"\1"),  # strikethrough
    (re.compile(r"`(.*?)`"), r"\1"),  # inline code
    (re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE), ""),  # list items
    (re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE), ""),  # numbered lists
    (re.compile(r"^>[ \t]*", re.MULTILINE), ""),  # blockquotes
]

_DOCUMENT_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0, user-scalable=no">
<style>
body {
    font-family: Georgia, serif;
    font-size: ${font_size}px;
    line-height: 1.6;
    margin: 0;
    padding: 16px;
    background-color: ${background};
    color: ${text};
    word-wrap: break-word;
}
.cover-page {
    text-align: center;
    padding: 40px 20px;
    min-height: 80vh;
    display: flex;
    flex-direction: column;
    justify-content: center;
    border-bottom: 2px solid ${surface};
    margin-bottom: 30px;
}
.cover-image {
    max-width: 80%;
    max-height: 60vh;
    height: auto;
    margin: 0 auto 20px auto;
}
.title { font-size: ${title_size}px; font-weight: bold; margin: 20px 0; }
.author { font-size: ${author_size}px; opacity: 0.8; margin-bottom: 10px; }
.description { font-size: ${description_size}px; opacity: 0.7; margin-top: 20px; line-height: 1.4; }
.chapter { margin-bottom: 40px; padding-bottom: 20px; }
.chapter-title {
    font-size: ${chapter_title_size}px;
    font-weight: bold;
    margin: 40px 0 20px 0;
    border-bottom: 2px solid ${surface};
    padding-bottom: 10px;
    text-align: center;
}
p { text-align: justify; margin-bottom: 1em; text-indent: 1.5em; }
img { max-width: 100%; height: auto; display: block; margin: 20px auto; }
blockquote {
    border-left: 4px solid ${surface};
    margin: 1em 0;
    padding: 1em;
    background-color: ${surface};
    font-style: italic;
}
table { width: 100%; border-collapse: collapse; margin: 1em 0; }
td, th { border: 1px solid ${surface}; padding: 8px; text-align: left; }
</style>
</head>
<body>
${cover}
${chapters}
</body>
</html>
"""
)


def data_uri(media_type: str, data: bytes) -> str:
    """Encode a payload as a self-contained ``data:`` URI."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


class ContentProcessor:
    """Turn chapter markup into plain text and self-contained HTML."""

    def _soup(self, markup: bytes | str) -> BeautifulSoup:
        soup = BeautifulSoup(markup, "lxml")
        for tag in soup(["script", "style"]):
            tag.decompose()
        return soup

    def html_to_text(self, markup: bytes | str) -> str:
        """Strip scripts, styles and tags, then collapse whitespace."""
        soup = self._soup(markup)
        body = soup.body or soup
        return patterns.collapse_whitespace(body.get_text(separator=" "))

    def markdown_to_text(self, markdown: str) -> str:
        """Remove Markdown syntax, keeping the readable text."""
        text = markdown
        for pattern, replacement in _MARKDOWN_RULES:
            text = pattern.sub(replacement, text)
        return text.strip()

    def inline_images(self, markup: str, images: Mapping[str, EpubImage]) -> str:
        """Replace ``<img src>`` values that name a known image with data URIs.

        Lookup uses the src exactly as written; unknown images are left alone.
        """

        def to_data_uri(src: str) -> str | None:
            image = images.get(src)
            if image is None:
                return None
            return data_uri(image.media_type, image.data)

        return patterns.replace_attribute(markup, "img", "src", to_data_uri)

    def normalize_chapter(
        self,
        markup: bytes | str,
        images: Mapping[str, EpubImage],
    ) -> tuple[str, str, list[str]]:
        """Return (plain text, body markup with inlined images, image hrefs used)."""
        soup = self._soup(markup)
        body = soup.body or soup
        text = patterns.collapse_whitespace(body.get_text(separator=" "))

        used = [
            img["src"]
            for img in body.find_all("img")
            if isinstance(img.get("src"), str) and img["src"] in images
        ]
        body_markup = self.inline_images(body.decode_contents(), images)
        return text, body_markup, used

    def build_styled_document(
        self,
        metadata: EpubMetadata,
        chapters: list[EpubChapter],
        font_size: float = 16.0,
        theme: ReadingTheme = ReadingTheme.LIGHT,
    ) -> str:
        """Wrap chapter markup in the reader style sheet behind a cover section."""
        background, text, surface = theme.colors

        cover_lines = ['<div class="cover-page">']
        if metadata.cover_image is not None:
            src = data_uri(metadata.cover_media_type or "image/jpeg", metadata.cover_image)
            cover_lines.append(f'<img src="{src}" class="cover-image" alt="Cover" />')
        cover_lines.append(f'<div class="title">{html.escape(metadata.title)}</div>')
        cover_lines.append(f'<div class="author">by {html.escape(metadata.author)}</div>')
        if metadata.description:
            cover_lines.append(
                f'<div class="description">{html.escape(metadata.description)}</div>'
            )
        cover_lines.append("</div>")

        chapter_html = "\n".join(
            '<div class="chapter">\n'
            f'<h2 class="chapter-title">{html.escape(chapter.title)}</h2>\n'
            f"{chapter.html_content}\n"
            "</div>"
            for chapter in chapters
        )

        return _DOCUMENT_TEMPLATE.substitute(
            font_size=f"{font_size:g}",
            title_size=f"{font_size * 1.8:g}",
            author_size=f"{font_size * 1.2:g}",
            description_size=f"{font_size * 0.9:g}",
            chapter_title_size=f"{font_size * 1.4:g}",
            background=background,
            text=text,
            surface=surface,
            cover="\n".join(cover_lines),
            chapters=chapter_html,
        )

    def get_stats(self, content: str) -> dict[str, int]:
        """Calculate content statistics."""
        words = content.split()
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(words),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }
