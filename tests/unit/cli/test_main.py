"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from cli.main import main
from tests.fixture_paths import fixture_job_properties, fixture_store_root


def _write_job(tmp_path: Path, overrides: dict[str, object] | None = None) -> str:
    job_file = tmp_path / "job.yaml"
    job_file.write_text(yaml.safe_dump(fixture_job_properties(overrides)), encoding="utf-8")
    return str(job_file)


def _relative(line: str) -> str:
    return line.rsplit("/config_store/", 1)[1]


def test_cli_find_prints_leaf_locations(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """CLI find should print one leaf location per line in path order."""
    job_path = _write_job(tmp_path, {"configbased.blacklist.tags": "tags/disabled"})

    exit_code = main(["--log-level", "error", "find", "--job", job_path])
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert [_relative(line) for line in lines] == ["data/metrics", "data/tracking/events"]


def test_cli_find_datasets_prints_resolved_config(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """CLI find --datasets should attach each dataset's resolved config."""
    job_path = _write_job(tmp_path, {"configbased.blacklist.tags": "tags/disabled"})

    exit_code = main(["--log-level", "error", "find", "--job", job_path, "--datasets"])
    lines = capsys.readouterr().out.strip().splitlines()
    location, rendered_config = lines[1].split("\t")

    assert exit_code == 0 and _relative(location) == "data/tracking/events"
    assert json.loads(rendered_config)["format"] == "avro"


def test_cli_find_reports_missing_required_key(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """CLI find should fail with exit code 1 for incomplete jobs."""
    job_file = tmp_path / "job.yaml"
    job_file.write_text("config.store.uri: file:///stores/main\n", encoding="utf-8")

    exit_code = main(["find", "--job", str(job_file)])
    output = capsys.readouterr().out.strip()

    assert exit_code == 1 and output.startswith("error=Missing required config entry")


def test_cli_imported_by_lists_direct_importers(capsys: pytest.CaptureFixture[str]) -> None:
    """CLI imported-by --direct should list explicit importers only."""
    store_uri = fixture_store_root().uri
    args = [
        "--log-level",
        "error",
        "imported-by",
        f"{store_uri}/tags/replicate",
        "--store-uri",
        store_uri,
        "--direct",
    ]

    exit_code = main(args)
    lines = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0
    assert [_relative(line) for line in lines] == ["data/tracking", "other/audit"]


def test_cli_imported_by_reports_unknown_scheme(capsys: pytest.CaptureFixture[str]) -> None:
    """Unsupported store schemes should be reported as errors."""
    exit_code = main(
        ["imported-by", "hdfs://nn/stores/tags/x", "--store-uri", "hdfs://nn/stores"]
    )

    assert exit_code == 1 and "No config store backend" in capsys.readouterr().out
