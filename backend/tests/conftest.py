import pytest
from fastapi.testclient import TestClient

from cashflow import middleware
from cashflow.config import Settings, get_settings
from cashflow.main import app
from cashflow.services.settlement_calculator import Member


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def override_settings(monkeypatch):
    def _override(**values):
        settings = Settings(**values)
        app.dependency_overrides[get_settings] = lambda: settings
        monkeypatch.setattr(middleware, "get_settings", lambda: settings)
        return settings
    return _override


@pytest.fixture
def three_way_split():
    return [
        Member(id="Alice", net=100.50),
        Member(id="Bob", net=-50.25),
        Member(id="Carol", net=-50.25),
    ]
