"""
Domain package for the S3 Select demo.

Exports the employee models shared by the generator, the encoders and the
pipeline. Keep this package focused on data definitions.
"""

from s3select.domain.models import EMPLOYEE_COLUMNS, Employee, Employees

__all__ = [
    "EMPLOYEE_COLUMNS",
    "Employee",
    "Employees",
]
