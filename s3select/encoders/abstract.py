"""
Abstract encoder interfaces for the S3 Select demo.

Concrete encoders (JSON, CSV, Parquet) implement the EmployeeEncoder protocol:
they turn an Employees collection into the bytes of one object and can read
those bytes back for verification.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from s3select.domain.models import Employees
from s3select.formats import DataFormat


@runtime_checkable
class EmployeeEncoder(Protocol):
    """
    Common interface all format encoders must implement.

    Attributes
    ----------
    format : DataFormat
        The serialized form this encoder produces.
    content_type : str
        MIME type sent with the uploaded object.
    """

    format: DataFormat
    content_type: str

    @property
    def key(self) -> str:
        """Object key the encoded bytes are uploaded under."""
        ...

    def encode(self, employees: Employees) -> bytes:
        """
        Serialize the collection, preserving record order.
        """
        ...

    def decode(self, data: bytes) -> Employees:
        """
        Parse bytes produced by ``encode`` back into a collection.
        """
        ...


class AbstractEmployeeEncoder(abc.ABC):
    """
    ABC helper for class-based encoders.

    Subclasses set ``format`` and ``content_type`` and implement ``encode``
    and ``decode``.
    """

    format: DataFormat
    content_type: str

    @property
    def key(self) -> str:
        return self.format.key

    @abc.abstractmethod
    def encode(self, employees: Employees) -> bytes:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def decode(self, data: bytes) -> Employees:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = ["AbstractEmployeeEncoder", "EmployeeEncoder"]
