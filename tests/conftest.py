"""
Pytest configuration for the S3 Select demo.

Provides fixtures for:
- Test settings isolated from the developer's environment
- A boto3-shaped fake S3 client with a tiny select evaluator
- Object store and record sink helpers
"""

from __future__ import annotations

import csv
import io
import json
import re
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pyarrow as pa
import pyarrow.parquet as pq
import pytest
from botocore.exceptions import ClientError

from s3select import config
from s3select.config import Settings
from s3select.infrastructure.object_store import ObjectStoreClient

TEST_BUCKET = "s3-select-test-bucket"

_AWS_ENV_VARS = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION", "AWS_ENDPOINT_URL", "S3_BUCKET")

_THRESHOLD_RE = re.compile(r">\s*(\d+)")
_LIMIT_RE = re.compile(r"limit\s+(\d+)", re.IGNORECASE)


class FakeEventStream:
    """Stands in for botocore's EventStream: iterable once, closable."""

    def __init__(self, events: Iterable[Dict[str, Any]], fail_after: Optional[int] = None) -> None:
        self._events = list(events)
        self._fail_after = fail_after
        self.close_calls = 0

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for index, event in enumerate(self._events):
            if self._fail_after is not None and index >= self._fail_after:
                raise ConnectionError("stream interrupted")
            yield event

    def close(self) -> None:
        self.close_calls += 1


def _matching_rows(rows: List[Dict[str, Any]], expression: str) -> List[Dict[str, Any]]:
    threshold = int(_THRESHOLD_RE.search(expression).group(1))
    limit_match = _LIMIT_RE.search(expression)
    matched = [row for row in rows if int(row["age"]) > threshold]
    if limit_match:
        matched = matched[: int(limit_match.group(1))]
    return matched


def _rows_from_object(body: bytes, input_serialization: Dict[str, Any]) -> List[Dict[str, Any]]:
    if "CSV" in input_serialization:
        reader = csv.reader(io.StringIO(body.decode("utf-8")))
        return [{"id": r[0], "name": r[1], "age": r[2]} for r in reader]
    if "JSON" in input_serialization:
        return json.loads(body)["employees"]
    return pq.read_table(pa.BufferReader(body)).to_pylist()


def _render(rows: List[Dict[str, Any]], output_serialization: Dict[str, Any]) -> bytes:
    if "CSV" in output_serialization:
        out = io.StringIO()
        csv.writer(out, lineterminator="\n").writerows(
            [row["id"], row["name"], row["age"]] for row in rows
        )
        return out.getvalue().encode("utf-8")
    delimiter = output_serialization["JSON"].get("RecordDelimiter", "\n")
    return "".join(json.dumps(row) + delimiter for row in rows).encode("utf-8")


class FakeS3Client:
    """
    Minimal boto3 S3 client double.

    ``select_object_content`` filters on ``age > N [limit M]`` so tests can
    observe realistic responses; queue ``scripted_events`` to return exact
    event sequences instead, and set ``fail_after`` to break streams mid-way.
    """

    def __init__(self, buckets: Iterable[str] = ()) -> None:
        self.buckets: Dict[str, Dict[str, bytes]] = {name: {} for name in buckets}
        self.content_types: Dict[str, Optional[str]] = {}
        self.create_requests: List[Dict[str, Any]] = []
        self.select_requests: List[Dict[str, Any]] = []
        self.scripted_events: List[List[Dict[str, Any]]] = []
        self.streams: List[FakeEventStream] = []
        self.fail_after: Optional[int] = None

    def head_bucket(self, Bucket: str) -> Dict[str, Any]:
        if Bucket not in self.buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        return {}

    def create_bucket(self, Bucket: str, **kwargs: Any) -> Dict[str, Any]:
        self.create_requests.append({"Bucket": Bucket, **kwargs})
        self.buckets.setdefault(Bucket, {})
        return {}

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: Optional[str] = None) -> Dict[str, Any]:
        self.buckets[Bucket][Key] = Body
        self.content_types[Key] = ContentType
        return {}

    def select_object_content(self, **kwargs: Any) -> Dict[str, Any]:
        self.select_requests.append(kwargs)
        if self.scripted_events:
            events = self.scripted_events.pop(0)
        else:
            body = self.buckets[kwargs["Bucket"]][kwargs["Key"]]
            rows = _matching_rows(
                _rows_from_object(body, kwargs["InputSerialization"]), kwargs["Expression"]
            )
            events = [
                {"Records": {"Payload": _render(rows, kwargs["OutputSerialization"])}},
                {"Stats": {"Details": {"BytesScanned": len(body), "BytesProcessed": len(body), "BytesReturned": 1}}},
                {"End": {}},
            ]
        stream = FakeEventStream(events, fail_after=self.fail_after)
        self.streams.append(stream)
        return {"Payload": stream, "ResponseMetadata": {"RequestId": "fake-request"}}


class RecordSink:
    """Collects record payloads in arrival order."""

    def __init__(self) -> None:
        self.chunks: List[bytes] = []

    def __call__(self, payload: bytes) -> None:
        self.chunks.append(payload)

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


@pytest.fixture(autouse=True)
def _isolated_settings(request, monkeypatch):
    """
    Keep developer AWS variables and cached settings out of unit tests.

    Integration tests keep the environment; they need real credentials.
    """
    if request.node.get_closest_marker("integration") is None:
        for name in _AWS_ENV_VARS:
            monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings fixture with small, test-specific values.
    """
    return Settings(
        _env_file=None,
        bucket_name=TEST_BUCKET,
        employee_count=50,
        log_level="DEBUG",
    )


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def store(fake_s3: FakeS3Client) -> ObjectStoreClient:
    return ObjectStoreClient(fake_s3, region="us-east-1")


@pytest.fixture
def sink() -> RecordSink:
    return RecordSink()


@pytest.fixture
def make_stream():
    """Factory for fake boto3 event streams."""
    return FakeEventStream
