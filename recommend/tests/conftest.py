import pytest
from fastapi.testclient import TestClient

from recommend.main import app
from recommend.routes.recommendations import get_recommendation_service
from recommend.services.recommendation_service import RecommendationService
from recommend.tests.fakes import FakeSearchBackend, FakePersonalizationBackend


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(name="search_backend")
def search_backend_fixture():
    """Backend поиска с одной рекомендацией"""
    return FakeSearchBackend()


@pytest.fixture(name="personalization_backend")
def personalization_backend_fixture():
    """Backend персонализации, возвращающий два фильтра"""
    return FakePersonalizationBackend()


@pytest.fixture(name="service")
def service_fixture(search_backend, personalization_backend):
    return RecommendationService(search_backend, personalization_backend)


@pytest.fixture(name="client")
def client_fixture(service: RecommendationService):
    """Создаем тестовый клиент"""

    def get_service_override():
        return service

    app.dependency_overrides[get_recommendation_service] = get_service_override

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
