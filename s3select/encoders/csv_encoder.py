"""
CSV encoder: one row per employee, columns ``id,name,age``, no header.

Rows are written in batches, the same way bulk CSV generation is buffered
elsewhere, so large collections never build one giant list of strings.
"""

from __future__ import annotations

import csv
import io
from typing import List, Sequence

from s3select.domain.models import EMPLOYEE_COLUMNS, Employee, Employees
from s3select.encoders.abstract import AbstractEmployeeEncoder
from s3select.formats import NEW_LINE, DataFormat


class CsvEncoder(AbstractEmployeeEncoder):
    """
    Headerless CSV in EMPLOYEE_COLUMNS order.

    Queries address columns positionally (``s._3`` is age), so the column
    order must not change.
    """

    format = DataFormat.CSV
    content_type = "text/csv"

    def __init__(self, batch_size: int = 10_000, delimiter: str = ",") -> None:
        self.batch_size = batch_size
        self.delimiter = delimiter

    def encode(self, employees: Employees) -> bytes:
        out = io.StringIO()
        writer = csv.writer(out, delimiter=self.delimiter, lineterminator=NEW_LINE)

        buffer: List[Sequence[object]] = []
        for row in employees.rows():
            buffer.append(row)
            if len(buffer) >= self.batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)
        return out.getvalue().encode("utf-8")

    def decode(self, data: bytes) -> Employees:
        reader = csv.reader(io.StringIO(data.decode("utf-8")), delimiter=self.delimiter)
        records = []
        for line_no, row in enumerate(reader, start=1):
            if len(row) != len(EMPLOYEE_COLUMNS):
                raise ValueError(
                    f"line {line_no}: expected {len(EMPLOYEE_COLUMNS)} columns, got {len(row)}"
                )
            record_id, name, age = row
            records.append(Employee(id=int(record_id), name=name, age=int(age)))
        return Employees(employees=records)


__all__ = ["CsvEncoder"]
