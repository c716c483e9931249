"""Locate the package document through META-INF/container.xml."""

from __future__ import annotations

from ebook_reader.core import patterns
from ebook_reader.core.errors import MissingRootfileError

CONTAINER_PATH = "META-INF/container.xml"


def find_rootfile_path(container_xml: str | None) -> str:
    """Return the ``full-path`` of the first rootfile declaration.

    Raises:
        MissingRootfileError: If the descriptor is absent or names no rootfile
    """
    if container_xml is None:
        raise MissingRootfileError(f"{CONTAINER_PATH} is missing")

    for rootfile in patterns.find_tags(container_xml, "rootfile"):
        full_path = patterns.attribute(rootfile, "full-path")
        if full_path:
            return full_path

    # Some producers mangle the element name but keep the attribute
    full_path = patterns.attribute(container_xml, "full-path")
    if full_path:
        return full_path

    raise MissingRootfileError(f"No rootfile declared in {CONTAINER_PATH}")
