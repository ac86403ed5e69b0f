"""
Input/output format descriptors for S3 Select requests.

Each builder returns the ``InputSerialization`` / ``OutputSerialization``
dictionary expected by ``select_object_content``. Only the container format
and delimiter choices are described here; parsing happens server-side.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

NEW_LINE = "\n"

Serialization = Dict[str, Any]


class DataFormat(str, Enum):
    """Serialized forms the demo uploads and queries."""

    JSON = "json"
    CSV = "csv"
    PARQUET = "parquet"

    @property
    def key(self) -> str:
        """Default object key, e.g. ``employees.csv``."""
        return f"employees.{self.value}"


def json_document_input() -> Serialization:
    """A single JSON document (as opposed to JSON Lines)."""
    return {"JSON": {"Type": "DOCUMENT"}}


def csv_input(
    file_header_info: str = "NONE",
    record_delimiter: str = NEW_LINE,
    field_delimiter: str = ",",
) -> Serialization:
    return {
        "CSV": {
            "FileHeaderInfo": file_header_info,
            "RecordDelimiter": record_delimiter,
            "FieldDelimiter": field_delimiter,
        }
    }


def parquet_input() -> Serialization:
    return {"Parquet": {}}


def json_output(record_delimiter: str = NEW_LINE) -> Serialization:
    """JSON records, one per ``record_delimiter``."""
    return {"JSON": {"RecordDelimiter": record_delimiter}}


def csv_output(record_delimiter: str = NEW_LINE, field_delimiter: str = ",") -> Serialization:
    return {"CSV": {"RecordDelimiter": record_delimiter, "FieldDelimiter": field_delimiter}}


def parse_format(name: str) -> DataFormat:
    """
    Resolve a format name (case-insensitive).

    Raises
    ------
    ValueError
        If the name is not one of the supported formats.
    """
    try:
        return DataFormat(name.strip().lower())
    except ValueError:
        available = ", ".join(fmt.value for fmt in DataFormat)
        raise ValueError(f"Unknown format '{name}'. Available: {available}") from None


__all__ = [
    "NEW_LINE",
    "DataFormat",
    "Serialization",
    "csv_input",
    "csv_output",
    "json_document_input",
    "json_output",
    "parquet_input",
    "parse_format",
]
