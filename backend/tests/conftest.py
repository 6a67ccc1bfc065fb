"""Shared fixtures: a fresh application per test and an authorised client."""

import pytest
from fastapi.testclient import TestClient

from ace.core.config import settings
from ace.main import create_app
from ace.templates.registry import TemplateRegistry


@pytest.fixture
def registry():
    """Registry holding only the built-in templates."""
    return TemplateRegistry.with_builtins()


@pytest.fixture
def facility_record():
    """A public-facilities record that passes every stage."""
    return {
        "localGovernmentCode": "131016",
        "identifier": "fac-001",
        "name": "千代田区役所",
        "address": "東京都千代田区九段南1-2-1",
        "facilityType": "cityOffice",
        "latitude": 35.6940,
        "longitude": 139.7536,
        "datasetUpdatedAt": "2024-04-01",
    }


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Bearer header for the configured prototype client."""
    response = client.post(
        "/oauth/token",
        json={
            "clientId": settings.OAUTH_CLIENT_ID,
            "clientSecret": settings.OAUTH_CLIENT_SECRET,
        },
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
