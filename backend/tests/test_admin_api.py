"""Tests for provisioning and the utility endpoints."""

from fastapi.testclient import TestClient

from potbot.config import Config
from potbot.main import create_app

from conftest import ADMIN_TOKEN


def test_generate_plants_returns_usable_credentials(client, device_client):
    response = client.post(
        "/api/generate_plants",
        json={"count": 3},
        headers={"X-Admin-Token": ADMIN_TOKEN},
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["plantIds"]) == len(body["plantSecrets"]) == 3
    assert len(set(body["plantIds"])) == 3
    for plant_id in body["plantIds"]:
        assert plant_id.startswith("plant_") and len(plant_id) == len("plant_00000")

    plant_id, secret = body["plantIds"][0], body["plantSecrets"][0]
    device = device_client(plant_id, secret)
    assert device.get("/api/plant/verify").status_code == 200


def test_generate_plants_defaults_to_ten(client):
    response = client.post("/api/generate_plants", headers={"X-Admin-Token": ADMIN_TOKEN})

    assert response.status_code == 200
    assert len(response.json()["plantIds"]) == 10


def test_generate_plants_stores_only_hashes(client, services):
    body = client.post(
        "/api/generate_plants", json={"count": 1}, headers={"X-Admin-Token": ADMIN_TOKEN}
    ).json()

    stored = services.plants.get_secret_hash(body["plantIds"][0])

    assert stored is not None
    assert stored != body["plantSecrets"][0]
    assert stored.startswith("$2")


def test_generate_plants_requires_admin_token(client):
    assert client.post("/api/generate_plants").status_code == 401
    assert client.post("/api/generate_plants", headers={"X-Admin-Token": "wrong"}).status_code == 401


def test_generate_plants_disabled_without_configured_token(tmp_path):
    config = Config(
        database_url=f"sqlite:///{tmp_path / 'no-admin.db'}",
        bcrypt_rounds=4,
        frontend_dir=str(tmp_path / "no-frontend"),
    )
    with TestClient(create_app(config)) as client:
        response = client.post("/api/generate_plants", headers={"X-Admin-Token": "anything"})

    assert response.status_code == 503


def test_ping(client):
    response = client.get("/api/ping")

    assert response.status_code == 200
    assert response.text == "pong"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_frontend_served_when_built(tmp_path):
    build = tmp_path / "build"
    build.mkdir()
    (build / "index.html").write_text("<html>potbot</html>")
    config = Config(
        database_url=f"sqlite:///{tmp_path / 'frontend.db'}",
        bcrypt_rounds=4,
        frontend_dir=str(build),
    )

    with TestClient(create_app(config)) as client:
        assert "potbot" in client.get("/").text
        assert client.get("/api/ping").text == "pong"
