"""
Filter query driver for the S3 Select demo.

Builds the per-format query specifications, submits them through the object
store client, and consumes the resulting event stream:

- RECORDS payloads are written to the sink as-is, in arrival order. The
  service already embeds record delimiters according to the requested output
  serialization, so nothing is re-delimited here.
- STATS details are captured and logged; PROGRESS, CONT, END and
  unrecognised events are only logged.
- The event stream and the result handle are each closed exactly once, on
  every exit path. Transport errors raised mid-stream propagate after cleanup.

Usage:
    from s3select.driver import build_queries, run_query

    for query in build_queries(age_threshold=50, limit=5):
        result = run_query(store, "my-bucket", query, sink=print_bytes)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol, TypedDict

from pydantic import BaseModel, Field

from s3select.events import EventKind, SelectEvent
from s3select.formats import (
    DataFormat,
    Serialization,
    csv_input,
    csv_output,
    json_document_input,
    json_output,
    parquet_input,
)
from s3select.utils.logging import get_logger
from s3select.utils.profiler import profile_block

log = get_logger(__name__)

Sink = Callable[[bytes], Any]


class _ClosableStream(Protocol):
    def __iter__(self): ...

    def close(self) -> None: ...


class _ClosableResult(Protocol):
    payload: _ClosableStream

    def close(self) -> None: ...


class FilterQuery(BaseModel):
    """
    One server-side select request against an uploaded object.
    """

    format: DataFormat = Field(..., description="Serialized form of the source object.")
    key: str = Field(..., description="Object key inside the bucket.")
    expression: str = Field(..., description="S3 Select SQL expression.")
    input_serialization: Serialization = Field(..., description="How to parse the object.")
    output_serialization: Serialization = Field(..., description="How to serialize results.")

    model_config = {"frozen": True}


class QueryStats(TypedDict, total=False):
    """
    What the driver observed while draining one event stream.
    """

    records_events: int
    records_bytes: int
    bytes_scanned: Optional[int]
    bytes_processed: Optional[int]
    bytes_returned: Optional[int]
    ended: bool


class QueryResult(TypedDict, total=False):
    format: str
    key: str
    expression: str
    duration_ms: int
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    stats: QueryStats


def build_queries(
    age_threshold: int = 50,
    limit: int = 5,
    keys: Optional[Dict[DataFormat, str]] = None,
) -> List[FilterQuery]:
    """
    The three demo queries: employees older than ``age_threshold``, at most
    ``limit`` of them, one query per uploaded format.
    """
    keys = keys or {}
    return [
        FilterQuery(
            format=DataFormat.JSON,
            key=keys.get(DataFormat.JSON, DataFormat.JSON.key),
            expression=(
                "select s.* from S3Object[*].employees[*] s "
                f"where s.age > {age_threshold} limit {limit}"
            ),
            input_serialization=json_document_input(),
            output_serialization=json_output(),
        ),
        FilterQuery(
            format=DataFormat.CSV,
            key=keys.get(DataFormat.CSV, DataFormat.CSV.key),
            expression=(
                "select s.* from S3Object s "
                f"where cast(s._3 as int) > {age_threshold} limit {limit}"
            ),
            input_serialization=csv_input(),
            output_serialization=csv_output(),
        ),
        FilterQuery(
            format=DataFormat.PARQUET,
            key=keys.get(DataFormat.PARQUET, DataFormat.PARQUET.key),
            expression=f"select s.* from S3Object s where s.age > {age_threshold} limit {limit}",
            input_serialization=parquet_input(),
            output_serialization=json_output(),
        ),
    ]


def default_serializations(fmt: DataFormat) -> tuple[Serialization, Serialization]:
    """Input/output descriptors used for ad-hoc queries against ``fmt`` objects."""
    if fmt is DataFormat.JSON:
        return json_document_input(), json_output()
    if fmt is DataFormat.CSV:
        return csv_input(), csv_output()
    return parquet_input(), json_output()


def _on_records(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    stats["records_events"] = stats.get("records_events", 0) + 1
    stats["records_bytes"] = stats.get("records_bytes", 0) + len(event.payload)
    sink(event.payload)


def _on_stats(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    stats["bytes_scanned"] = event.details.get("BytesScanned")
    stats["bytes_processed"] = event.details.get("BytesProcessed")
    stats["bytes_returned"] = event.details.get("BytesReturned")
    log.info("Select stats", extra={"details": event.details})


def _on_progress(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    log.debug("Select progress", extra={"details": event.details})


def _on_cont(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    log.debug("Select keep-alive")


def _on_end(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    stats["ended"] = True
    log.debug("Select stream ended")


def _on_unknown(event: SelectEvent, stats: QueryStats, sink: Sink) -> None:
    log.debug("Skipping unrecognised select event", extra={"details": event.details})


_HANDLERS: Dict[EventKind, Callable[[SelectEvent, QueryStats, Sink], None]] = {
    EventKind.RECORDS: _on_records,
    EventKind.STATS: _on_stats,
    EventKind.PROGRESS: _on_progress,
    EventKind.CONT: _on_cont,
    EventKind.END: _on_end,
    EventKind.UNKNOWN: _on_unknown,
}


def consume_events(result: _ClosableResult, sink: Sink) -> QueryStats:
    """
    Drain ``result.payload`` into ``sink`` and release both handles.

    Parameters
    ----------
    result : SelectResult
        Response handle returned by ``ObjectStoreClient.select_object_content``.
    sink : Callable[[bytes], Any]
        Receives each RECORDS payload unchanged.

    Returns
    -------
    QueryStats
        Counters observed while draining the stream.
    """
    stats: QueryStats = {"records_events": 0, "records_bytes": 0, "ended": False}
    try:
        stream = result.payload
        try:
            for event in stream:
                _HANDLERS[event.kind](event, stats, sink)
        finally:
            stream.close()
    finally:
        result.close()
    return stats


def run_query(store: Any, bucket: str, query: FilterQuery, sink: Sink) -> QueryResult:
    """
    Submit ``query`` against ``bucket`` and print its records into ``sink``.

    Errors from submission or from the stream propagate unchanged.
    """
    log.info(
        f"[QUERY START] {query.format.value}",
        extra={"format": query.format.value, "key": query.key},
    )
    with profile_block(f"query:{query.format.value}") as timing:
        result = store.select_object_content(
            bucket,
            query.key,
            query.expression,
            query.input_serialization,
            query.output_serialization,
        )
        stats = consume_events(result, sink)
    log.info(
        f"[QUERY DONE] {query.format.value}",
        extra={
            "format": query.format.value,
            "duration_ms": timing.elapsed_ms,
            "peak_rss_bytes": timing.peak_rss_bytes,
            "records_bytes": stats.get("records_bytes"),
        },
    )
    return QueryResult(
        format=query.format.value,
        key=query.key,
        expression=query.expression,
        duration_ms=timing.elapsed_ms,
        peak_rss_bytes=timing.peak_rss_bytes,
        cpu_percent=timing.cpu_percent,
        stats=stats,
    )


__all__ = [
    "FilterQuery",
    "QueryResult",
    "QueryStats",
    "Sink",
    "build_queries",
    "consume_events",
    "default_serializations",
    "run_query",
]
