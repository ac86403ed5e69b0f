from __future__ import annotations

import pytest

from s3select.driver import consume_events
from s3select.events import EventKind, SelectEventStream, SelectResult, parse_event


def test_parse_records_event():
    event = parse_event({"Records": {"Payload": b"1,Ada,60\n"}})

    assert event.kind is EventKind.RECORDS
    assert event.payload == b"1,Ada,60\n"


def test_parse_stats_event_keeps_details():
    details = {"BytesScanned": 10, "BytesProcessed": 10, "BytesReturned": 3}
    event = parse_event({"Stats": {"Details": details}})

    assert event.kind is EventKind.STATS
    assert event.details == details
    assert event.payload == b""


@pytest.mark.parametrize("key", ["Progress", "Cont", "End"])
def test_parse_lifecycle_events(key: str):
    assert parse_event({key: {}}).kind is EventKind(key)


def test_parse_unrecognised_event_is_tagged_unknown():
    event = parse_event({"IntelligentTieringProgress": {}})

    assert event.kind is EventKind.UNKNOWN
    assert event.details == {"keys": ["IntelligentTieringProgress"]}


def test_unrecognised_events_are_skipped_while_draining(make_stream, sink):
    raw = make_stream(
        [
            {"Records": {"Payload": b"1,Ada Lovelace,60\n"}},
            {"IntelligentTieringProgress": {}},
            {"Records": {"Payload": b"2,Alan Turing,70\n"}},
            {"End": {}},
        ]
    )
    result = SelectResult({"Payload": raw})

    stats = consume_events(result, sink)

    assert sink.data == b"1,Ada Lovelace,60\n2,Alan Turing,70\n"
    assert stats["records_events"] == 2
    assert stats["ended"] is True
    assert raw.close_calls == 1
    assert result.closed


def test_stream_is_single_pass(make_stream):
    stream = SelectEventStream(make_stream([{"End": {}}]))

    assert [e.kind for e in stream] == [EventKind.END]
    with pytest.raises(RuntimeError, match="single-pass"):
        list(stream)


def test_stream_close_is_idempotent(make_stream):
    raw = make_stream([])
    stream = SelectEventStream(raw)

    stream.close()
    stream.close()

    assert raw.close_calls == 1
    assert stream.closed


def test_result_close_releases_stream_once(make_stream):
    raw = make_stream([])
    result = SelectResult({"Payload": raw, "ResponseMetadata": {"RequestId": "abc"}})

    assert result.request_id == "abc"
    result.payload.close()
    result.close()
    result.close()

    assert raw.close_calls == 1
    assert result.closed
