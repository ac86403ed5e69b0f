"""
Domain models for the S3 Select demo.

Defines the employee record and the ordered collection that every encoder
consumes. Field order matters: it is the column order of the CSV and Parquet
objects and the key order of the JSON document.
"""
from __future__ import annotations

from typing import Iterator, List, Tuple

from pydantic import BaseModel, Field

EMPLOYEE_COLUMNS: Tuple[str, ...] = ("id", "name", "age")


class Employee(BaseModel):
    """
    A single synthetic employee.
    """

    id: int = Field(..., gt=0, description="Sequential identifier starting at 1.")
    name: str = Field(..., description="Full name.")
    age: int = Field(..., description="Age in years.")

    model_config = {"frozen": True}

    def as_row(self) -> Tuple[int, str, int]:
        """Flatten the record to a row in EMPLOYEE_COLUMNS order."""
        return (self.id, self.name, self.age)


class Employees(BaseModel):
    """
    Ordered collection of employees; insertion order is generation order.
    """

    employees: List[Employee] = Field(default_factory=list)

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.employees)

    def rows(self) -> Iterator[Tuple[int, str, int]]:
        return (employee.as_row() for employee in self.employees)


__all__ = ["EMPLOYEE_COLUMNS", "Employee", "Employees"]
