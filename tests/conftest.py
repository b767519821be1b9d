"""
Pytest Configuration and Fixtures
Provides common test fixtures for the test suite
"""
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest
import yaml

from meter_reconstruction.config_loader import EngineSettings
from tests.fixtures.mock_data import make_point, make_reading


@pytest.fixture
def reading_factory():
    return make_reading


@pytest.fixture
def point_factory():
    return make_point


@pytest.fixture
def test_config():
    """Provide a test configuration dictionary"""
    return {
        "tolerance_days": 3,
        "include_year_boundaries": True,
        "logging": {
            "level": "INFO",
            "format": "json",
            "file": "/tmp/test_meter_reconstruction.log",
        },
    }


@pytest.fixture
def test_config_files(tmp_path, test_config):
    """Create a temporary config directory holding config.yaml"""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    config_file = config_dir / "config.yaml"
    with config_file.open("w") as f:
        yaml.dump(test_config, f)

    return config_dir


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set environment overrides for testing"""
    monkeypatch.setenv("METER_TOLERANCE_DAYS", "5")
    monkeypatch.setenv("METER_LOG_LEVEL", "DEBUG")


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    """Keep a developer's shell settings out of the tests"""
    for var in (
        "METER_TOLERANCE_DAYS",
        "METER_INCLUDE_YEAR_BOUNDARIES",
        "METER_TIMEZONE",
        "METER_LOG_LEVEL",
        "METER_LOG_FORMAT",
        "METER_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def quarterly_readings():
    """Actual readings at the end of Jan, Apr, Jul and Oct 2024"""
    return [
        make_reading(datetime(2024, 1, 31), 1000.0),
        make_reading(datetime(2024, 4, 30), 1300.0),
        make_reading(datetime(2024, 7, 31), 1600.0),
        make_reading(datetime(2024, 10, 31), 1900.0),
    ]


@pytest.fixture
def sample_readings_frame():
    """Readings in the timestamp/value layout used by the persistence layer"""
    return pd.DataFrame(
        {
            "timestamp": pd.to_datetime(["2024-01-31", "2024-02-29", "2024-03-31"]),
            "value": [1000.0, 1100.0, 1200.0],
        }
    )


@pytest.fixture(autouse=True)
def cleanup_logs():
    """Clean up test log files after each test"""
    yield
    log_file = Path("/tmp/test_meter_reconstruction.log")
    if log_file.exists():
        log_file.unlink()
