"""
Tests for the user-facing endpoints: accounts, claiming plants, issuing
commands and the ownership checks around them.
"""

import pytest
from fastapi.testclient import TestClient

from potbot.errors import InvalidCredentials
from potbot.services import user_service
from potbot.services.credentials import check_secret
from potbot.services.sessions import COOKIE_NAME

from conftest import register


class TestAccounts:

    def test_register_sets_session(self, client):
        user = register(client)

        assert user["email"] == "ada@example.com"
        assert user["username"] == "ada"
        assert COOKIE_NAME in client.cookies

        me = client.get("/api/me")
        assert me.status_code == 200
        assert me.json() == user

    def test_register_requires_email_and_password(self, client):
        response = client.post("/api/register", json={"email": "ada@example.com"})

        assert response.status_code == 400
        assert response.json() == {"detail": "email and password required"}

    def test_duplicate_email_rejected(self, client):
        register(client)

        response = client.post(
            "/api/register",
            json={"email": "ada@example.com", "password": "other", "username": "other"},
        )

        assert response.status_code == 400

    def test_login_and_logout(self, app, client):
        user = register(client)
        fresh = TestClient(app)

        assert fresh.get("/api/me").status_code == 401

        response = fresh.post("/api/login", json={"username": "ada", "password": "hunter22"})
        assert response.status_code == 200
        assert response.json() == user
        assert fresh.get("/api/me").status_code == 200

        response = fresh.post("/api/logout")
        assert response.status_code == 204
        assert fresh.get("/api/me").status_code == 401

    def test_bad_login_messages_match(self, app, client):
        register(client)
        fresh = TestClient(app)

        wrong_password = fresh.post("/api/login", json={"username": "ada", "password": "nope"})
        unknown_user = fresh.post("/api/login", json={"username": "bob", "password": "nope"})

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"detail": "invalid credentials"}

    def test_unknown_username_still_checks_a_hash(self, services, monkeypatch):
        calls = []

        def recording_check(password, stored_hash):
            calls.append(stored_hash)
            return check_secret(password, stored_hash)

        monkeypatch.setattr(user_service, "check_secret", recording_check)

        with pytest.raises(InvalidCredentials):
            services.users.authenticate("nobody", "hunter22")

        assert len(calls) == 1
        assert calls[0].startswith("$2")

    def test_tampered_session_cookie_is_ignored(self, app, client):
        fresh = TestClient(app, cookies={COOKIE_NAME: "not-a-real-session"})

        assert fresh.get("/api/me").status_code == 401


class TestPlants:

    def test_claim_and_list(self, client, user, plants):
        plant_id, _ = plants[0]

        response = client.post(
            "/api/add_plant",
            json={"plantId": plant_id, "plantName": "Fern", "type": "fern"},
        )
        assert response.status_code == 201
        assert response.json() == {"status": "success"}

        listed = client.get("/api/get_all_my_plants").json()
        assert listed == [{"plantName": "Fern", "plantID": plant_id, "type": "fern"}]

    def test_list_empty(self, client, user):
        assert client.get("/api/get_all_my_plants").json() == []

    def test_claim_unknown_plant(self, client, user):
        response = client.post("/api/add_plant", json={"plantId": "plant_nope", "type": "fern"})

        assert response.status_code == 400
        assert response.json() == {"detail": "invalid plant ID"}

    def test_claim_requires_type(self, client, user, plants):
        response = client.post("/api/add_plant", json={"plantId": plants[0][0]})

        assert response.status_code == 400

    def test_cannot_claim_twice(self, app, client, owned_plant):
        plant_id, _ = owned_plant
        other = TestClient(app)
        register(other, email="bob@example.com", username="bob")

        response = other.post("/api/add_plant", json={"plantId": plant_id, "type": "cactus"})

        assert response.status_code == 400
        assert response.json() == {"detail": "plant ID already associated with a user"}

    def test_plant_endpoints_require_login(self, client):
        assert client.get("/api/get_all_my_plants").status_code == 401
        assert client.post("/api/issue_command", json={"plantId": "x", "command": "y"}).status_code == 401


class TestIssueCommand:

    def test_queues_command(self, client, owned_plant, services):
        plant_id, _ = owned_plant

        response = client.post("/api/issue_command", json={"plantId": plant_id, "command": "WATER_NOW"})

        assert response.status_code == 201
        assert services.command_queue.pending_count(plant_id) == 1

    def test_not_owner_is_forbidden(self, app, client, owned_plant, services):
        plant_id, _ = owned_plant
        other = TestClient(app)
        register(other, email="bob@example.com", username="bob")

        response = other.post("/api/issue_command", json={"plantId": plant_id, "command": "WATER_NOW"})

        assert response.status_code == 403
        assert services.command_queue.pending_count(plant_id) == 0

    def test_unknown_plant_is_not_found(self, client, user, services):
        response = client.post("/api/issue_command", json={"plantId": "plant_nope", "command": "WATER_NOW"})

        assert response.status_code == 404
        assert len(services.command_queue) == 0

    def test_unclaimed_plant_is_not_found(self, client, user, plants, services):
        plant_id, _ = plants[1]

        response = client.post("/api/issue_command", json={"plantId": plant_id, "command": "WATER_NOW"})

        assert response.status_code == 404
        assert services.command_queue.pending_count(plant_id) == 0

    def test_requires_plant_id_and_command(self, client, owned_plant):
        plant_id, _ = owned_plant

        assert client.post("/api/issue_command", json={"command": "WATER_NOW"}).status_code == 400
        assert client.post("/api/issue_command", json={"plantId": plant_id}).status_code == 400


class TestPlantLogs:

    def test_logs_of_someone_elses_plant_are_forbidden(self, app, client, owned_plant):
        plant_id, _ = owned_plant
        other = TestClient(app)
        register(other, email="bob@example.com", username="bob")

        response = other.post(
            "/api/get_plant_logs",
            json={"plantID": plant_id, "startDate": "2026-01-01T00:00:00Z", "endDate": "2026-12-31T00:00:00Z"},
        )

        assert response.status_code == 403

    def test_empty_range_has_every_type(self, client, owned_plant):
        plant_id, _ = owned_plant

        response = client.post(
            "/api/get_plant_logs",
            json={"plantID": plant_id, "startDate": "2000-01-01T00:00:00Z", "endDate": "2000-01-02T00:00:00Z"},
        )

        assert response.status_code == 200
        assert response.json() == {"light": [], "temp": [], "moisture": []}
