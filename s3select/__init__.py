"""
S3 Select demo - server-side filtering over generated employee data.

This package generates synthetic employee records, uploads them to an
S3-compatible object store as JSON, CSV and Parquet, and runs S3 Select
queries against each object, timing and printing the results:

- Synthetic data generation
- Format encoders (JSON document, headerless CSV, Parquet)
- A thin boto3 object store wrapper
- A query driver that drains the select event stream

The query evaluation itself is done by the object store; nothing here parses
or evaluates SQL.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from s3select.config import Settings, get_settings
from s3select.domain.models import EMPLOYEE_COLUMNS, Employee, Employees
from s3select.driver import FilterQuery, build_queries, consume_events, run_query
from s3select.encoders import available_formats, get_encoder
from s3select.events import EventKind, SelectEvent, SelectEventStream, SelectResult
from s3select.formats import DataFormat
from s3select.generator import generate_employees
from s3select.infrastructure.object_store import ObjectStoreClient, build_s3_client
from s3select.pipeline import DemoConfig, run_demo
from s3select.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "EMPLOYEE_COLUMNS",
    "Employee",
    "Employees",
    "generate_employees",
    # Formats and encoders
    "DataFormat",
    "available_formats",
    "get_encoder",
    # Object store and events
    "ObjectStoreClient",
    "build_s3_client",
    "EventKind",
    "SelectEvent",
    "SelectEventStream",
    "SelectResult",
    # Driver and pipeline
    "FilterQuery",
    "build_queries",
    "consume_events",
    "run_query",
    "DemoConfig",
    "run_demo",
    # Logging
    "configure_logging",
    "get_logger",
]
