"""
Global test configuration and fixtures for the private sharing example

Every test gets an application built from test settings with a freshly
generated private key, and the data-sharing client replaced by a stub.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from private_sharing.core.config import Settings
from private_sharing.main import create_app
from private_sharing.web.dependencies import get_sharing_client
from tests.utils.factories import StubSharingClient
from tests.utils.helpers import generate_private_key_pem


# ============================================================================
# Test Environment Setup
# ============================================================================

@pytest.fixture(scope="session")
def private_key_pem() -> str:
    """One RSA key for the whole run; generating keys is slow"""
    return generate_private_key_pem()


@pytest.fixture(scope="function")
def private_key_file(tmp_path: Path, private_key_pem: str) -> Path:
    key_file = tmp_path / "digi-me-private.key"
    key_file.write_text(private_key_pem)
    return key_file


@pytest.fixture(scope="function")
def test_settings(private_key_file: Path) -> Settings:
    """Settings for testing"""
    return Settings(
        DIGIME_APPLICATION_ID="test-app-id",
        DIGIME_CONTRACT_ID="test-contract-id",
        DIGIME_PRIVATE_KEY_PATH=private_key_file,
        DIGIME_BASE_URL="https://api.digime.test/v1.5",
        PUBLIC_BASE_URL=None,
        POLL_INTERVAL=0,
        VERIFY_RETURNED_SESSIONS=False,
    )


# ============================================================================
# Application Client Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def stub_client() -> StubSharingClient:
    return StubSharingClient()


@pytest.fixture(scope="function")
def app_factory(stub_client):
    """Build an application wired to the stub client"""
    def _build(settings: Settings):
        app = create_app(settings)
        app.dependency_overrides[get_sharing_client] = lambda: stub_client
        return app
    return _build


@pytest.fixture(scope="function")
def app(app_factory, test_settings):
    return app_factory(test_settings)


@pytest.fixture(scope="function")
def client(app):
    """Create FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# Test Markers and Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: fast tests of a single module"
    )
    config.addinivalue_line(
        "markers", "integration: tests running requests through the application"
    )
