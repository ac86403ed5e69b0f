"""
Pipeline for the S3 Select demo: generate, encode, upload, query.

Usage (example from CLI):
    from s3select.pipeline import DemoConfig, run_demo

    results = run_demo(DemoConfig(count=1_000))

Every step runs sequentially and blocks until complete. Any failure
propagates and ends the run. When ``persist`` is set, results are saved to
``results/`` by default:
- ``results/latest.json`` (last run)
- ``results/run-<timestamp>.json`` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import typer

from s3select.config import Settings, get_settings
from s3select.domain.models import Employees
from s3select.driver import Sink, build_queries, run_query
from s3select.encoders import available_formats, get_encoder
from s3select.formats import DataFormat, parse_format
from s3select.generator import generate_employees
from s3select.infrastructure.object_store import ObjectStoreClient
from s3select.utils.logging import get_logger
from s3select.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

Echo = Callable[[str], Any]


def echo_records(payload: bytes) -> None:
    """Default sink: raw record bytes straight to stdout."""
    typer.echo(payload, nl=False)


@dataclass(frozen=True)
class DemoConfig:
    """
    Parameters of one demo run. ``None`` fields fall back to settings.
    """

    count: Optional[int] = None
    formats: Sequence[str] = ("all",)
    bucket: Optional[str] = None
    seed: Optional[int] = None
    output_dir: Optional[Path] = None
    results_dir: Path = Path("results")
    persist: bool = True


def resolve_formats(names: Sequence[str]) -> List[DataFormat]:
    """Expand ``["all"]``, validate format names and drop repeats, keeping upload order."""
    names = list(names) or ["all"]
    if len(names) == 1 and names[0] == "all":
        names = available_formats()
    selected: List[DataFormat] = []
    for name in names:
        fmt = parse_format(name)
        if fmt not in selected:
            selected.append(fmt)
    return selected


def encode_all(employees: Employees, formats: Sequence[DataFormat]) -> Dict[DataFormat, bytes]:
    """Encode the collection once per format. Encoding errors propagate."""
    encoded: Dict[DataFormat, bytes] = {}
    for fmt in formats:
        encoded[fmt] = get_encoder(fmt).encode(employees)
        log.debug("Encoded", extra={"format": fmt.value, "bytes": len(encoded[fmt])})
    return encoded


def write_local_files(encoded: Dict[DataFormat, bytes], output_dir: Path) -> List[Path]:
    """Write each encoded object under ``output_dir`` using its object key."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for fmt, data in encoded.items():
        path = output_dir / fmt.key
        path.write_bytes(data)
        paths.append(path)
        log.info("Wrote local file", extra={"path": str(path), "bytes": len(data)})
    return paths


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_demo(
    config: Optional[DemoConfig] = None,
    store: Optional[ObjectStoreClient] = None,
    sink: Optional[Sink] = None,
    echo: Optional[Echo] = None,
    settings: Optional[Settings] = None,
) -> List[dict]:
    """
    Run the whole demo and return one result dict per format.

    Parameters
    ----------
    config : DemoConfig | None
        Run parameters; defaults come from settings.
    store : ObjectStoreClient | None
        Object store wrapper. Built from settings when omitted.
    sink : Callable[[bytes], Any] | None
        Receives record payloads. Defaults to stdout.
    echo : Callable[[str], Any] | None
        Receives the human-readable timing lines. Defaults to ``typer.echo``.

    Returns
    -------
    List[dict]
        ``{"format", "key", "object_bytes", "upload_ms", "duration_ms",
        "peak_rss_bytes", "cpu_percent", ...}`` per format, in upload order.
        Memory and CPU figures of the upload step carry an ``upload_`` prefix.
    """
    config = config or DemoConfig()
    settings = settings or get_settings()
    store = store or ObjectStoreClient.from_settings(settings)
    sink = sink or echo_records
    echo = echo or typer.echo

    count = settings.employee_count if config.count is None else config.count
    bucket = config.bucket or settings.bucket_name
    formats = resolve_formats(config.formats)

    log.info("[DEMO START]", extra={"bucket": bucket, "count": count, "formats": [f.value for f in formats]})

    if store.ensure_bucket(bucket):
        echo(f"Created bucket {bucket}")

    employees = generate_employees(
        count,
        min_age=settings.employee_min_age,
        max_age=settings.employee_max_age,
        seed=config.seed,
    )
    encoded = encode_all(employees, formats)
    if config.output_dir is not None:
        write_local_files(encoded, config.output_dir)

    uploads: Dict[DataFormat, ProfileStats] = {}
    for fmt in formats:
        encoder = get_encoder(fmt)
        with profile_block(f"upload:{fmt.value}") as timing:
            store.put_object(bucket, encoder.key, encoded[fmt], content_type=encoder.content_type)
        uploads[fmt] = timing
        echo(f"Took {timing.elapsed_ms} ms to upload {count:,} records in {fmt.value} format")

    queries = [
        q
        for q in build_queries(settings.query_age_threshold, settings.query_limit)
        if q.format in uploads
    ]
    results: List[dict] = []
    for query in queries:
        echo(f"--- {query.format.value}: {query.expression}")
        outcome = run_query(store, bucket, query, sink)
        echo(
            f"Took {outcome['duration_ms']} ms to get {settings.query_limit} records "
            f"with age > {settings.query_age_threshold} from {count:,} records "
            f"in {query.format.value} format"
        )
        result = dict(outcome)
        result["object_bytes"] = len(encoded[query.format])
        upload = uploads[query.format]
        result["upload_ms"] = upload.elapsed_ms
        result["upload_peak_rss_bytes"] = upload.peak_rss_bytes
        result["upload_cpu_percent"] = upload.cpu_percent
        results.append(result)

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "bucket": bucket,
        "count": count,
        "formats": [fmt.value for fmt in formats],
        "results": results,
    }
    if config.persist:
        _persist_results(payload, Path(config.results_dir))

    log.info("[DEMO COMPLETE]", extra={"bucket": bucket, "formats": payload["formats"]})
    return results


__all__ = [
    "DemoConfig",
    "echo_records",
    "encode_all",
    "resolve_formats",
    "run_demo",
    "write_local_files",
]
