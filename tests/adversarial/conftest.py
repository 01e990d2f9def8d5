"""
Shared fixtures for adversarial tests.

Provides a client safe to share between worker threads.
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def shared_client(app: FastAPI) -> Generator[TestClient, None, None]:
    """One client (and one event loop) used by every thread."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
