"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A seeded record file and settings pointing at tmp_path
- In-memory fakes for the error log and alert sender
- An application built with injected collaborators and its test client
"""

import json
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.store.json_file import JsonFileUserStore
from src.api.main import create_app
from src.config.settings import Settings
from tests.fakes import MemoryErrorLog, RecordingAlertSender

SEED_RECORDS = {
    "1": {"email": "taken@example.com", "name": "Taken"},
    "2": "legacy@example.com",
}


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Record file seeded with two users."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(SEED_RECORDS))
    return path


@pytest.fixture
def settings(tmp_path: Path, data_file: Path) -> Settings:
    """Settings isolated from the environment and .env file."""
    return Settings(
        _env_file=None,
        data_file=str(data_file),
        error_log_file=str(tmp_path / "errors.log"),
        sendgrid_api_key=None,
        alert_to="ops@example.com",
        alert_from="noreply@example.com",
    )


@pytest.fixture
def alert_sender() -> RecordingAlertSender:
    return RecordingAlertSender()


@pytest.fixture
def error_log() -> MemoryErrorLog:
    return MemoryErrorLog()


@pytest.fixture
def app(
    settings: Settings,
    data_file: Path,
    alert_sender: RecordingAlertSender,
    error_log: MemoryErrorLog,
) -> FastAPI:
    """Application wired with the seeded store and in-memory fakes."""
    return create_app(
        settings,
        user_store=JsonFileUserStore(data_file),
        alert_sender=alert_sender,
        error_log=error_log,
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client running the app lifespan.

    Server exceptions are not re-raised so failure responses can be inspected.
    """
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
