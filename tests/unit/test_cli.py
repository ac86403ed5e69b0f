from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from s3select import main as cli
from s3select import pipeline
from s3select.encoders import CsvEncoder
from s3select.generator import generate_employees

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_info_masks_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE123")
    monkeypatch.setenv("S3_BUCKET", "cli-bucket")

    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "bucket=cli-bucket" in result.stdout
    assert "AKID****" in result.stdout
    assert "AKIDEXAMPLE123" not in result.stdout


def test_generate_writes_local_files(tmp_path: Path):
    result = runner.invoke(
        cli.app,
        ["generate", "--count", "12", "--seed", "3", "--output-dir", str(tmp_path), "-f", "csv", "-f", "json"],
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in tmp_path.iterdir()) == ["employees.csv", "employees.json"]
    assert len((tmp_path / "employees.csv").read_text().splitlines()) == 12


def test_generate_rejects_unknown_format(tmp_path: Path):
    result = runner.invoke(cli.app, ["generate", "-f", "xml", "--output-dir", str(tmp_path)])

    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)


def test_query_prints_records(monkeypatch, store, fake_s3):
    store.ensure_bucket("cli-bucket")
    employees = generate_employees(30, seed=4)
    store.put_object("cli-bucket", "employees.csv", CsvEncoder().encode(employees))
    monkeypatch.setattr(cli.ObjectStoreClient, "from_settings", classmethod(lambda cls, settings=None: store))

    result = runner.invoke(
        cli.app,
        [
            "query",
            "--format", "csv",
            "--bucket", "cli-bucket",
            "--expression", "select s.* from S3Object s where cast(s._3 as int) > 45 limit 3",
        ],
    )

    assert result.exit_code == 0, result.output
    assert fake_s3.select_requests[0]["Key"] == "employees.csv"
    printed = [line for line in result.stdout.splitlines() if not line.startswith("Took ")]
    assert 0 < len(printed) <= 3
    assert all(int(line.split(",")[2]) > 45 for line in printed)


def test_run_uses_settings_and_store(monkeypatch, store, fake_s3):
    monkeypatch.setenv("S3_BUCKET", "cli-run-bucket")
    monkeypatch.setenv("EMPLOYEE_COUNT", "20")
    monkeypatch.setattr(
        pipeline.ObjectStoreClient, "from_settings", classmethod(lambda cls, settings=None: store)
    )

    result = runner.invoke(cli.app, ["run", "--no-persist", "--seed", "1"])

    assert result.exit_code == 0, result.output
    assert sorted(fake_s3.buckets["cli-run-bucket"]) == [
        "employees.csv",
        "employees.json",
        "employees.parquet",
    ]
    assert result.stdout.count("Took ") == 6
