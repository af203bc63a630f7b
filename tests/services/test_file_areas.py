"""
Tests for FileAreaService.
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from uuid import uuid4

import pytest

from fftanalyzer.core.exceptions import FilesystemError, InvalidInputError
from fftanalyzer.core.utils import utcnow
from fftanalyzer.services import FileAreaService


@pytest.fixture
def areas(mock_repository, paths_config) -> FileAreaService:
    service = FileAreaService(mock_repository, paths_config)
    service.ensure_areas()
    return service


@pytest.fixture
def source(mock_repository, tmp_path) -> Path:
    return mock_repository.add_file(tmp_path / "incoming" / "pump.csv", "Time,Amplitude\n0,1\n")


class TestStaging:
    """Tests for copying sources into the staging area."""

    def test_ensure_areas(self, areas, mock_repository, paths_config):
        for area in (paths_config.upload, paths_config.staging, paths_config.success, paths_config.fail):
            assert mock_repository.exists(area)

    def test_staged_name_format(self):
        name = FileAreaService.staged_name("pump.csv", now=datetime(2024, 5, 6, 7, 8, 9))

        date, time, unique, original = name.split("_", 3)
        assert (date, time) == ("20240506", "070809")
        assert len(unique) == 32
        assert original == "pump.csv"

    def test_staged_names_are_unique(self):
        now = datetime(2024, 1, 1)
        assert FileAreaService.staged_name("a.csv", now) != FileAreaService.staged_name("a.csv", now)

    def test_stage_copies_source(self, areas, mock_repository, source, paths_config):
        staged = areas.stage(source)

        assert staged.parent == paths_config.staging
        assert staged.name.endswith("_pump.csv")
        assert mock_repository.read_text(staged) == mock_repository.read_text(source)
        assert mock_repository.is_file(source)

    def test_stage_missing_source(self, areas, tmp_path):
        with pytest.raises(FilesystemError, match="not found"):
            areas.stage(tmp_path / "missing.csv")

    def test_stage_copy_failure(self, areas, mock_repository, source, paths_config):
        mock_repository.fail_writes_to.add(str(paths_config.staging))

        with pytest.raises(FilesystemError, match="Failed to stage"):
            areas.stage(source)


class TestMoves:
    """Tests for success and fail moves."""

    def test_move_to_success_writes_sidecar(self, areas, mock_repository, source, paths_config):
        staged = areas.stage(source)
        record_id = uuid4()

        final = areas.move_to_success(staged, record_id)

        assert final.parent == paths_config.success
        assert final.name == f"{record_id.hex}_{staged.name}"
        assert not mock_repository.exists(staged)
        sidecar = json.loads(mock_repository.read_text(areas.sidecar_path(final)))
        assert sidecar["RecordId"] == str(record_id)
        assert sidecar["OriginalFileName"] == staged.name
        assert sidecar["Status"] == "Success"
        assert "ProcessedAt" in sidecar

    def test_move_to_success_failure_keeps_staged_file(self, areas, mock_repository, source, paths_config):
        staged = areas.stage(source)
        mock_repository.fail_moves_to.add(str(paths_config.success))

        with pytest.raises(FilesystemError):
            areas.move_to_success(staged, uuid4())

        assert mock_repository.is_file(staged)

    def test_move_to_success_completes_after_sidecar_failure(
        self, areas, mock_repository, source, paths_config
    ):
        staged = areas.stage(source)
        record_id = uuid4()
        final = areas.success_path(staged, record_id)
        mock_repository.fail_writes_to.add(str(paths_config.success))

        with pytest.raises(FilesystemError):
            areas.move_to_success(staged, record_id)

        assert not mock_repository.exists(staged)
        assert mock_repository.is_file(final)
        assert not mock_repository.exists(areas.sidecar_path(final))

        mock_repository.fail_writes_to.clear()
        assert areas.move_to_success(staged, record_id) == final

        sidecar = json.loads(mock_repository.read_text(areas.sidecar_path(final)))
        assert sidecar["RecordId"] == str(record_id)
        assert mock_repository.read_text(final) == "Time,Amplitude\n0,1\n"

    def test_json_source_is_not_overwritten_by_sidecar(self, areas, mock_repository, tmp_path):
        source = mock_repository.add_file(tmp_path / "incoming" / "readings.json", "Time,Amplitude\n0,1\n")
        staged = areas.stage(source)

        final = areas.move_to_success(staged, uuid4())

        assert areas.sidecar_path(final) != final
        assert areas.sidecar_path(final).name == f"{final.name}.meta.json"
        assert mock_repository.read_text(final) == "Time,Amplitude\n0,1\n"

    def test_move_to_success_missing_staged(self, areas, paths_config):
        with pytest.raises(FilesystemError, match="not found"):
            areas.move_to_success(paths_config.staging / "gone.csv", uuid4())

    def test_move_to_fail_writes_error_note(self, areas, mock_repository, source, paths_config):
        staged = areas.stage(source)

        failed = areas.move_to_fail(staged, "No samples could be parsed.")

        assert failed == paths_config.fail / staged.name
        note = mock_repository.read_text(areas.error_note_path(failed))
        assert note.startswith("Failed at: ")
        assert "Error: No samples could be parsed.\n" in note
        assert areas.error_note_path(failed).name.endswith(".error.txt")

    def test_move_to_fail_missing_staged(self, areas, paths_config):
        assert areas.move_to_fail(paths_config.staging / "gone.csv", "boom") is None


class TestExportAndPurge:
    """Tests for CSV export and retention purge."""

    def test_export_csv(self, areas, mock_repository, tmp_path):
        output = areas.export_csv(tmp_path / "out.csv", [0.0, 10.0], [0.5, 0.25])

        assert mock_repository.read_text(output) == (
            "FrequencyHz,Amplitude\n0.000000,0.500000\n10.000000,0.250000\n"
        )

    def test_export_write_failure(self, areas, mock_repository, tmp_path):
        mock_repository.fail_writes_to.add(str(tmp_path / "readonly"))

        with pytest.raises(FilesystemError):
            areas.export_csv(tmp_path / "readonly" / "out.csv", [1.0], [1.0])

    def test_purge_expired(self, areas, mock_repository, paths_config):
        now = utcnow()
        old = now - timedelta(days=40)
        mock_repository.add_file(paths_config.success / "old.csv", "x", modified=old)
        mock_repository.add_file(paths_config.fail / "old.csv", "x", modified=old)
        mock_repository.add_file(paths_config.success / "new.csv", "x", modified=now)
        mock_repository.add_file(paths_config.staging / "old.csv", "x", modified=old)

        deleted = areas.purge_expired(30, now=now)

        assert deleted == 2
        assert mock_repository.exists(paths_config.success / "new.csv")
        assert mock_repository.exists(paths_config.staging / "old.csv")
        assert not mock_repository.exists(paths_config.fail / "old.csv")

    def test_purge_negative_retention(self, areas):
        with pytest.raises(InvalidInputError):
            areas.purge_expired(-1)

    def test_area_usage(self, areas, mock_repository, source):
        staged = areas.stage(source)
        areas.move_to_fail(staged, "boom")

        usage = areas.area_usage()

        assert usage["staging"] == (0, 0)
        assert usage["success"] == (0, 0)
        count, size = usage["fail"]
        assert count == 2
        assert size > len("Time,Amplitude\n0,1\n")
