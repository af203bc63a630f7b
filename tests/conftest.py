# tests/conftest.py
"""
Global pytest fixtures for fftanalyzer tests.
"""

from pathlib import Path

import pytest

from fftanalyzer.core.config import AppConfig, PathsConfig, get_default_config
from fftanalyzer.database import DatabaseConnection
from fftanalyzer.services import ServiceFactory
from tests.helpers import sine, write_time_domain_csv
from tests.mocks.mock_repository import MockFileRepository


@pytest.fixture
def mock_repository() -> MockFileRepository:
    """Create a mock file repository for testing."""
    return MockFileRepository()


@pytest.fixture
def paths_config(tmp_path) -> PathsConfig:
    upload = tmp_path / "upload"
    return PathsConfig(
        upload=upload,
        staging=upload / "staging",
        success=upload / "success",
        fail=upload / "fail",
    )


@pytest.fixture
def app_config(tmp_path, paths_config) -> AppConfig:
    """Default configuration with a SQLite file and file areas under tmp_path."""
    return (
        get_default_config()
        .with_overrides("database", url=f"sqlite:///{tmp_path / 'test.db'}")
        .with_overrides(
            "paths",
            upload=paths_config.upload,
            staging=paths_config.staging,
            success=paths_config.success,
            fail=paths_config.fail,
        )
    )


@pytest.fixture
def database(app_config):
    """SQLite database with tables created."""
    db = DatabaseConnection(app_config.database.url)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def factory(app_config, database) -> ServiceFactory:
    """ServiceFactory over the local filesystem below tmp_path."""
    factory = ServiceFactory(app_config, database=database, user_provider=lambda: "tester")
    factory.initialize()
    return factory


@pytest.fixture
def time_domain_file(tmp_path) -> Path:
    """1024 samples of a 1 kHz sine at 8 kHz with a time column."""
    return write_time_domain_csv(tmp_path / "sine_1k.csv", sine(1000.0, 8000, 1024), 8000)


@pytest.fixture
def frequency_domain_file(tmp_path) -> Path:
    path = tmp_path / "spectrum.csv"
    path.write_text(
        "Frequency,Amplitude\n0,0.1\n10,0.5\n20,0.2\n30,0.9\n40,0.3\n50,0.4\n60,0.1\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def header_only_file(tmp_path) -> Path:
    path = tmp_path / "empty.csv"
    path.write_text("Time,Amplitude\n", encoding="utf-8")
    return path
