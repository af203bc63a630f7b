"""
Integration tests for the fftanalyzer CLI.
"""

import json

import pytest
from click.testing import CliRunner

from fftanalyzer import __version__
from fftanalyzer.cli import cli
from tests.helpers import sine, write_time_domain_csv


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, paths_config):
    """TOML config pointing the database and file areas below tmp_path."""
    path = tmp_path / "fftanalyzer.toml"
    path.write_text(
        "[database]\n"
        f"url = 'sqlite:///{(tmp_path / 'cli.db').as_posix()}'\n\n"
        "[paths]\n"
        f"upload = '{paths_config.upload.as_posix()}'\n"
        f"staging = '{paths_config.staging.as_posix()}'\n"
        f"success = '{paths_config.success.as_posix()}'\n"
        f"fail = '{paths_config.fail.as_posix()}'\n\n"
        "[logging]\n"
        "level = 'WARNING'\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def invoke(runner, config_file):
    """Invoke the CLI with the test configuration."""

    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--config", str(config_file), *args], **kwargs)

    return _invoke


@pytest.fixture
def ingested(invoke, time_domain_file):
    """Ingest the sine file and return its JSON result."""
    result = invoke("ingest", "file", str(time_domain_file), "--name", "Sine", "--format", "json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestCLIBasics:
    """Tests for help, version and setup commands."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for group in ("ingest", "records", "spectrum", "config", "db"):
            assert group in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_db_init_creates_areas(self, invoke, paths_config):
        result = invoke("db", "init")

        assert result.exit_code == 0, result.output
        assert "Database ready" in result.output
        for area in (paths_config.staging, paths_config.success, paths_config.fail):
            assert area.is_dir()

    def test_db_stats(self, invoke, ingested):
        result = invoke("db", "stats")

        assert result.exit_code == 0, result.output
        assert "Records" in result.output
        assert "Success" in result.output

    def test_config_show(self, invoke, config_file):
        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "[ingest]" in result.output
        assert "default_sample_rate = 25600" in result.output
        assert config_file.name in result.output

    def test_config_paths(self, invoke):
        result = invoke("config", "paths")

        assert result.exit_code == 0
        assert "ACTIVE" in result.output

    def test_config_purge(self, invoke, paths_config):
        invoke("db", "init")
        (paths_config.success / "old.csv").write_text("x", encoding="utf-8")

        result = invoke("config", "purge", "--days", "0", "--yes")

        assert result.exit_code == 0, result.output
        assert "Purged" in result.output

    def test_config_purge_aborted(self, invoke):
        result = invoke("config", "purge", input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output

    def test_bad_log_level(self, runner, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[logging]\nlevel = 'CHATTY'\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file), "config", "show"])

        assert result.exit_code != 0


class TestIngestCommands:
    """Tests for ingest file/batch."""

    def test_ingest_file_json(self, ingested, paths_config):
        assert ingested["success"] is True
        assert ingested["data"]["display_name"] == "Sine"
        assert ingested["data"]["sample_rate"] == 8000
        assert ingested["data"]["finalized"] is True
        assert ingested["metadata"]["stage"] == "finalized"
        assert len(list(paths_config.success.glob("*.meta.json"))) == 1

    def test_ingest_file_table(self, invoke, frequency_domain_file):
        result = invoke("ingest", "file", str(frequency_domain_file))

        assert result.exit_code == 0, result.output
        assert "frequency_domain" in result.output
        assert "Top peak" in result.output

    def test_ingest_file_failure(self, invoke, header_only_file, paths_config):
        result = invoke("ingest", "file", str(header_only_file))

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert any(p.name.endswith(".error.txt") for p in paths_config.fail.iterdir())

    def test_ingest_file_missing(self, invoke, tmp_path):
        result = invoke("ingest", "file", str(tmp_path / "missing.csv"))

        assert result.exit_code == 2

    def test_ingest_batch(self, invoke, tmp_path):
        batch_dir = tmp_path / "batch"
        batch_dir.mkdir()
        for i in range(3):
            write_time_domain_csv(batch_dir / f"s{i}.csv", sine(50 * (i + 1), 1000, 128), 1000)

        result = invoke("ingest", "batch", str(batch_dir), "--workers", "2", "--quiet")

        assert result.exit_code == 0, result.output
        assert "Succeeded" in result.output

        listed = json.loads(invoke("records", "list", "--format", "json").output)
        assert len(listed) == 3

    def test_ingest_batch_with_failure(self, invoke, tmp_path):
        batch_dir = tmp_path / "batch"
        batch_dir.mkdir()
        write_time_domain_csv(batch_dir / "good.csv", sine(50, 1000, 128), 1000)
        (batch_dir / "bad.csv").write_text("Time,Amplitude\n", encoding="utf-8")

        result = invoke("ingest", "batch", str(batch_dir), "-q")

        assert result.exit_code == 1
        assert "Failed" in result.output


class TestRecordCommands:
    """Tests for records list/search/show/peaks/export/update/delete."""

    def test_list_json(self, invoke, ingested):
        result = invoke("records", "list", "--format", "json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["id"] for r in data] == [ingested["data"]["record_id"]]

    def test_list_empty(self, invoke):
        result = invoke("records", "list")

        assert result.exit_code == 0
        assert "No records found" in result.output

    def test_search(self, invoke, ingested):
        found = json.loads(invoke("records", "search", "SIN", "--format", "json").output)
        missing = json.loads(invoke("records", "search", "pump", "--format", "json").output)

        assert len(found) == 1
        assert missing == []

    def test_search_date_range(self, invoke, ingested):
        result = invoke("records", "search", "--from", "2000-01-01", "--to", "2000-12-31", "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_show(self, invoke, ingested):
        record_id = ingested["data"]["record_id"]

        data = json.loads(invoke("records", "show", record_id, "--format", "json").output)

        assert data["id"] == record_id
        assert data["stored_samples"] == 512
        assert data["sample_count"] == 1024

    def test_show_table(self, invoke, ingested):
        result = invoke("records", "show", ingested["data"]["record_id"])

        assert result.exit_code == 0
        assert "Stored samples:" in result.output

    def test_show_unknown(self, invoke):
        result = invoke("records", "show", "00000000-0000-0000-0000-000000000000")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_peaks(self, invoke, ingested):
        result = invoke("records", "peaks", ingested["data"]["record_id"], "--top-n", "3")

        assert result.exit_code == 0, result.output

    def test_export(self, invoke, ingested, tmp_path):
        output = tmp_path / "export.csv"

        result = invoke("records", "export", ingested["data"]["record_id"], str(output))

        assert result.exit_code == 0, result.output
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "FrequencyHz,Amplitude"
        assert len(lines) == 513

    def test_update(self, invoke, ingested):
        record_id = ingested["data"]["record_id"]

        result = invoke("records", "update", record_id, "--name", "Renamed", "--notes", "checked")

        assert result.exit_code == 0, result.output
        data = json.loads(invoke("records", "show", record_id, "--format", "json").output)
        assert data["display_name"] == "Renamed"
        assert data["notes"] == "checked"

    def test_update_nothing(self, invoke, ingested):
        result = invoke("records", "update", ingested["data"]["record_id"])

        assert result.exit_code == 1

    def test_delete(self, invoke, ingested):
        record_id = ingested["data"]["record_id"]

        aborted = invoke("records", "delete", record_id, input="n\n")
        assert "Aborted" in aborted.output

        result = invoke("records", "delete", record_id, "--yes")
        assert result.exit_code == 0, result.output
        assert invoke("records", "show", record_id).exit_code == 1


class TestSpectrumCommands:
    """Tests for spectrum compute."""

    def test_compute_json(self, invoke, time_domain_file):
        result = invoke("spectrum", "compute", str(time_domain_file), "--format", "json", "--top-n", "1")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["sample_rate"] == 8000
        assert data["transform_length"] == 1024
        assert len(data["peaks"]) == 1
        assert abs(data["peaks"][0]["frequency"] - 1000.0) <= 8000 / 1024

    def test_compute_csv(self, invoke, time_domain_file):
        result = invoke("spectrum", "compute", str(time_domain_file), "--format", "csv", "--no-auto-detect",
                        "--sample-rate", "16000")

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "FrequencyHz,Amplitude"
        assert lines[2].startswith("15.625000,")

    def test_compute_table_with_output(self, invoke, time_domain_file, tmp_path):
        output = tmp_path / "spectrum_out.csv"

        result = invoke("spectrum", "compute", str(time_domain_file), "--log-scale", "-o", str(output))

        assert result.exit_code == 0, result.output
        assert "Length (N):  1024" in result.output
        assert output.read_text(encoding="utf-8").startswith("FrequencyHz,Amplitude\n")

    def test_compute_frequency_domain_rejected(self, invoke, frequency_domain_file):
        result = invoke("spectrum", "compute", str(frequency_domain_file))

        assert result.exit_code == 1
        assert "frequency-domain" in result.output
