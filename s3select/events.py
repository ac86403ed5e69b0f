"""
Typed view over the S3 Select response event stream.

boto3 yields one single-key dict per event (``{"Records": {"Payload": b"..."}}``,
``{"Stats": {"Details": {...}}}``, ``{"End": {}}``, ...). ``parse_event`` turns
each into a SelectEvent tagged with an EventKind so consumers can dispatch on
the kind instead of probing dict keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional


class EventKind(str, Enum):
    RECORDS = "Records"
    STATS = "Stats"
    PROGRESS = "Progress"
    CONT = "Cont"
    END = "End"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SelectEvent:
    """
    One element of the response stream.

    ``payload`` is only set for RECORDS events; ``details`` carries the byte
    counters of STATS and PROGRESS events, or the raw keys of an UNKNOWN one.
    """

    kind: EventKind
    payload: bytes = b""
    details: Dict[str, Any] = field(default_factory=dict)


def parse_event(raw: Mapping[str, Any]) -> SelectEvent:
    """
    Convert a raw boto3 event dict to a SelectEvent.

    Event types this module does not know about become UNKNOWN events so
    that consumers can skip them.
    """
    for kind in EventKind:
        if kind is EventKind.UNKNOWN or kind.value not in raw:
            continue
        body = raw[kind.value] or {}
        if kind is EventKind.RECORDS:
            return SelectEvent(kind=kind, payload=bytes(body.get("Payload", b"")))
        return SelectEvent(kind=kind, details=dict(body.get("Details", {})))
    return SelectEvent(kind=EventKind.UNKNOWN, details={"keys": sorted(raw)})


class SelectEventStream:
    """
    Finite, single-pass stream of SelectEvents.

    Wraps the boto3 ``EventStream`` found under the response's ``Payload``
    key. Iterating a second time raises; ``close`` releases the underlying
    HTTP body and may be called more than once.
    """

    def __init__(self, raw_stream: Iterable[Mapping[str, Any]]) -> None:
        self._raw_stream = raw_stream
        self._consumed = False
        self.closed = False

    def __iter__(self) -> Iterator[SelectEvent]:
        if self._consumed:
            raise RuntimeError("event stream is single-pass and has already been iterated")
        self._consumed = True
        for raw in self._raw_stream:
            yield parse_event(raw)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        close = getattr(self._raw_stream, "close", None)
        if close is not None:
            close()


class SelectResult:
    """
    Handle on a ``select_object_content`` response.

    ``payload`` is the event stream; ``close`` releases the whole response,
    including the stream if a consumer did not close it first.
    """

    def __init__(self, response: Mapping[str, Any]) -> None:
        self._response: Optional[Mapping[str, Any]] = response
        self.payload = SelectEventStream(response["Payload"])
        self.request_id: Optional[str] = (
            response.get("ResponseMetadata", {}).get("RequestId")
        )

    @property
    def closed(self) -> bool:
        return self._response is None

    def close(self) -> None:
        if self._response is None:
            return
        self.payload.close()
        self._response = None


__all__ = [
    "EventKind",
    "SelectEvent",
    "SelectEventStream",
    "SelectResult",
    "parse_event",
]
