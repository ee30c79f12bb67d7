from dependency_injector import providers
from fastapi.testclient import TestClient
import pytest

from src.main import app
from src.platform.config.di import cleanup, container


@pytest.fixture
def client(store):
    """TestClient over the memory backend, serving the test's own store."""
    cleanup()
    container.in_memory_store.override(providers.Object(store))
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.in_memory_store.reset_override()
        cleanup()


@pytest.fixture
def auth_headers():
    def _headers(principal_id: int) -> dict[str, str]:
        token = container.jwt_auth().create_access_token(principal_id=principal_id)
        return {'Authorization': f'Bearer {token}'}

    return _headers
