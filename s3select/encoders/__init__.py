"""
Encoders package for the S3 Select demo.

Re-exports the encoder interfaces and concrete encoders, plus a small registry
so the pipeline and CLI can resolve encoders by format name.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Union

from s3select.encoders.abstract import AbstractEmployeeEncoder, EmployeeEncoder
from s3select.encoders.csv_encoder import CsvEncoder
from s3select.encoders.json_encoder import JsonEncoder
from s3select.encoders.parquet_encoder import ParquetEncoder
from s3select.formats import DataFormat, parse_format


def _encoder_factories() -> Dict[DataFormat, Callable[[], EmployeeEncoder]]:
    """Registry of available encoders, in upload order."""
    return {
        DataFormat.JSON: JsonEncoder,
        DataFormat.CSV: CsvEncoder,
        DataFormat.PARQUET: ParquetEncoder,
    }


def available_formats() -> List[str]:
    """List available format names in upload order."""
    return [fmt.value for fmt in _encoder_factories()]


def get_encoder(name: Union[str, DataFormat]) -> EmployeeEncoder:
    """
    Build the encoder for a format.

    Raises
    ------
    ValueError
        If the format is unknown.
    """
    fmt = name if isinstance(name, DataFormat) else parse_format(name)
    return _encoder_factories()[fmt]()


__all__ = [
    # Abstracts
    "AbstractEmployeeEncoder",
    "EmployeeEncoder",
    # Concrete encoders
    "CsvEncoder",
    "JsonEncoder",
    "ParquetEncoder",
    # Registry
    "available_formats",
    "get_encoder",
]
