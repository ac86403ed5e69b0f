"""
Parquet encoder backed by pyarrow.

Columns follow EMPLOYEE_COLUMNS, so age is the third column just as in the
CSV object.
"""

from __future__ import annotations

import pyarrow as pa
import pyarrow.parquet as pq

from s3select.domain.models import EMPLOYEE_COLUMNS, Employee, Employees
from s3select.encoders.abstract import AbstractEmployeeEncoder
from s3select.formats import DataFormat

EMPLOYEE_SCHEMA = pa.schema(
    [
        pa.field("id", pa.int64(), nullable=False),
        pa.field("name", pa.string(), nullable=False),
        pa.field("age", pa.int32(), nullable=False),
    ]
)


class ParquetEncoder(AbstractEmployeeEncoder):
    format = DataFormat.PARQUET
    content_type = "application/vnd.apache.parquet"

    def __init__(self, compression: str = "snappy") -> None:
        self.compression = compression

    def to_table(self, employees: Employees) -> pa.Table:
        records = employees.employees
        columns = {
            "id": [e.id for e in records],
            "name": [e.name for e in records],
            "age": [e.age for e in records],
        }
        return pa.Table.from_pydict(columns, schema=EMPLOYEE_SCHEMA)

    def encode(self, employees: Employees) -> bytes:
        sink = pa.BufferOutputStream()
        pq.write_table(self.to_table(employees), sink, compression=self.compression)
        return sink.getvalue().to_pybytes()

    def decode(self, data: bytes) -> Employees:
        table = pq.read_table(pa.BufferReader(data))
        if tuple(table.column_names) != EMPLOYEE_COLUMNS:
            raise ValueError(f"unexpected columns {table.column_names}")
        return Employees(employees=[Employee(**row) for row in table.to_pylist()])


__all__ = ["EMPLOYEE_SCHEMA", "ParquetEncoder"]
