"""EPUB ingestion and text pagination core for an e-book reader."""

__version__ = "0.1.0"
