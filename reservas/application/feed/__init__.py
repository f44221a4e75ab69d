"""Ingesta del feed externo de reservaciones."""

from reservas.application.feed.csv_reader import looks_like_html, read_rows
from reservas.application.feed.field_resolver import (
    Ambiguous,
    FieldResolver,
    Found,
    Missing,
    normalize_header,
)
from reservas.application.feed.ingestor import FeedIngestor

__all__ = [
    "FeedIngestor",
    "FieldResolver",
    "Found",
    "Missing",
    "Ambiguous",
    "normalize_header",
    "read_rows",
    "looks_like_html",
]
