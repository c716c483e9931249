"""Exceptions raised by the ingestion core."""

PARSE_FAILURE_MESSAGE = (
    "Could not parse EPUB content. The file may be corrupted or use an "
    "unsupported EPUB variant."
)


class EbookReaderError(Exception):
    """Base class for all reader errors."""

    pass


class ParseError(EbookReaderError):
    """A document could not be turned into an EpubDocument."""

    pass


class ArchiveError(ParseError):
    """The container bytes are not a valid or complete ZIP archive."""

    pass


class InvalidContainerError(ParseError):
    """The container descriptor or package document is absent or unparseable."""

    pass


class MissingRootfileError(InvalidContainerError):
    """The container descriptor does not point to a package document."""

    pass


class UnsupportedFormatError(EbookReaderError, ValueError):
    """The book format has no reader implementation."""

    pass
