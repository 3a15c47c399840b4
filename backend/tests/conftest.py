"""
Pytest Configuration and Fixtures for the Potbot backend.

Every test that needs the API gets its own app on a throwaway SQLite file,
with a low bcrypt cost so hashing does not dominate the run time.
"""

import logging
import sys

import pytest
from fastapi.testclient import TestClient

from potbot.config import Config
from potbot.main import create_app
from potbot.routers import get_services

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Show log output from the app when a test fails."""
    formatter = logging.Formatter(fmt="%(levelname)-8s %(name)s: %(message)s")
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)


@pytest.fixture
def config(tmp_path):
    return Config(
        database_url=f"sqlite:///{tmp_path / 'potbot-test.db'}",
        secret_key="test-secret-key",
        admin_token=ADMIN_TOKEN,
        bcrypt_rounds=4,
        frontend_dir=str(tmp_path / "no-frontend"),
    )


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    """Test client with the app started (lifespan run) for the whole test."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def services(client):
    return get_services()


@pytest.fixture
def plants(services):
    """Two freshly provisioned, unclaimed plants as (plant_id, secret) pairs."""
    return services.plants.provision_plants(2)


def register(client, email="ada@example.com", password="hunter22", username="ada"):
    response = client.post(
        "/api/register",
        json={"email": email, "password": password, "username": username},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def user(client):
    """A registered user; `client` now carries their session cookie."""
    return register(client)


@pytest.fixture
def owned_plant(client, user, plants):
    """A plant claimed by `user`, as (plant_id, secret)."""
    plant_id, secret = plants[0]
    response = client.post(
        "/api/add_plant",
        json={"plantId": plant_id, "plantName": "Fern", "type": "fern"},
    )
    assert response.status_code == 201, response.text
    return plant_id, secret


@pytest.fixture
def device_client(app, client):
    """Build a client that authenticates as a plant via cookies."""
    def _make(plant_id, secret):
        return TestClient(app, cookies={"plant_id": plant_id, "plant_secret": secret})
    return _make
