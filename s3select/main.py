from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from s3select.config import get_settings
from s3select.driver import FilterQuery, default_serializations, run_query
from s3select.encoders import available_formats
from s3select.formats import parse_format
from s3select.generator import generate_employees
from s3select.infrastructure.object_store import ObjectStoreClient
from s3select.pipeline import DemoConfig, echo_records, encode_all, resolve_formats, run_demo, write_local_files
from s3select.reporter import print_results
from s3select.utils.logging import configure_logging

app = typer.Typer(help="S3 Select demo CLI.")


def _mask(secret: Optional[str]) -> str:
    if not secret:
        return "<default chain>"
    return secret[:4] + "****"


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"bucket={settings.bucket_name} region={settings.aws_region} "
        f"endpoint={settings.aws_endpoint_url or '<aws>'} key={_mask(settings.aws_access_key_id)} | "
        f"count={settings.employee_count} ages=[{settings.employee_min_age}, {settings.employee_max_age}) "
        f"filter=age>{settings.query_age_threshold} limit={settings.query_limit}"
    )


@app.command()
def run(
    formats: List[str] = typer.Option(
        ["all"],
        "--format",
        "-f",
        help="Format to upload and query (json, csv, parquet, all). Repeatable.",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        help="Override number of employees to generate (default from settings).",
    ),
    bucket: Optional[str] = typer.Option(None, "--bucket", "-b", help="Override target bucket."),
    seed: Optional[int] = typer.Option(None, "--seed", help="RNG seed for reproducible data."),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Also write the encoded files to this directory.",
    ),
    no_persist: bool = typer.Option(False, "--no-persist", help="Skip writing results/*.json."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
) -> None:
    """
    Generate employees, upload them in every format and run the filter queries.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=json_logs)

    results = run_demo(
        DemoConfig(
            count=count,
            formats=formats,
            bucket=bucket,
            seed=seed,
            output_dir=output_dir,
            persist=not no_persist,
        )
    )
    print_results(results)


@app.command()
def generate(
    formats: List[str] = typer.Option(["all"], "--format", "-f", help="Format(s) to write."),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of employees."),
    seed: Optional[int] = typer.Option(None, "--seed", help="RNG seed for reproducible data."),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Destination directory."),
) -> None:
    """
    Generate employees and write the encoded files locally, without uploading.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level)
    total = settings.employee_count if count is None else count
    selected = resolve_formats(formats)

    employees = generate_employees(
        total,
        min_age=settings.employee_min_age,
        max_age=settings.employee_max_age,
        seed=seed,
    )
    for path in write_local_files(encode_all(employees, selected), output_dir):
        typer.echo(f"Wrote {path} ({path.stat().st_size:,} bytes)")


@app.command()
def query(
    format_name: str = typer.Option(
        ...,
        "--format",
        "-f",
        help=f"Format of the target object ({', '.join(available_formats())}).",
    ),
    expression: str = typer.Option(..., "--expression", "-e", help="S3 Select SQL expression."),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Object key (default employees.<format>)."),
    bucket: Optional[str] = typer.Option(None, "--bucket", "-b", help="Override target bucket."),
) -> None:
    """
    Run one ad-hoc filter query against an uploaded object and print the records.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level)
    fmt = parse_format(format_name)
    input_serialization, output_serialization = default_serializations(fmt)

    outcome = run_query(
        ObjectStoreClient.from_settings(settings),
        bucket or settings.bucket_name,
        FilterQuery(
            format=fmt,
            key=key or fmt.key,
            expression=expression,
            input_serialization=input_serialization,
            output_serialization=output_serialization,
        ),
        sink=echo_records,
    )
    typer.echo(f"Took {outcome['duration_ms']} ms")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
