"""
JSON encoder: one indented document with an ``employees`` array.

The document shape matches the ``S3Object[*].employees[*]`` path used by the
JSON filter query.
"""

from __future__ import annotations

from s3select.domain.models import Employees
from s3select.encoders.abstract import AbstractEmployeeEncoder
from s3select.formats import DataFormat


class JsonEncoder(AbstractEmployeeEncoder):
    format = DataFormat.JSON
    content_type = "application/json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def encode(self, employees: Employees) -> bytes:
        return employees.model_dump_json(indent=self.indent).encode("utf-8")

    def decode(self, data: bytes) -> Employees:
        return Employees.model_validate_json(data)


__all__ = ["JsonEncoder"]
