"""Dataset ingestion adapters."""

from .file_reader import (
    UniversalFileReader,
    DatasetParseError,
    parse_text_to_dataset,
    unique_headers,
    guess_delimiter,
)

__all__ = [
    "UniversalFileReader",
    "DatasetParseError",
    "parse_text_to_dataset",
    "unique_headers",
    "guess_delimiter",
]
