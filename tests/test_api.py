# tests/test_api.py
"""HTTP-level tests: status codes, error bodies, and the sharing walkthrough."""

import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from garage.config import settings
from garage.errors import UpstreamError


def register(client, email, password):
    return client.post("/api/auth/register", json={"email": email, "password": password})


def login(client, email, password) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def signup(client, email, password="secret1") -> dict:
    assert register(client, email, password).status_code == 201
    return login(client, email, password)


def new_vehicle(client, headers, placa="ABC-1234", **extra):
    body = {"placa": placa, "marca": "Fiat", "modelo": "Uno", "ano": 2015, "cor": "Azul", "tipo": "Carro"}
    body.update(extra)
    return client.post("/api/veiculos", json=body, headers=headers)


class TestAuthEndpoints:
    def test_register_then_duplicate(self, client):
        first = register(client, "owner@test.com", "secret1")
        second = register(client, "  OWNER@test.com ", "secret9")
        assert first.status_code == 201
        assert "message" in first.json()
        assert second.status_code == 409
        assert "error" in second.json()

    def test_register_validation(self, client):
        assert register(client, "not-an-email", "secret1").status_code == 400
        assert register(client, "owner@test.com", "123").status_code == 400

    def test_register_rejects_nul_byte_and_overlong_email(self, client):
        resp = register(client, "owner@test.com", "abc\x00defg")
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert register(client, "a" * 250 + "@test.com", "secret1").status_code == 400
        assert register(client, "owner@test.com", "secret1").status_code == 201

    def test_register_missing_field_is_400(self, client):
        resp = client.post("/api/auth/register", json={"email": "owner@test.com"})
        assert resp.status_code == 400
        assert "password" in resp.json()["error"]

    def test_login_bad_credentials(self, client):
        register(client, "owner@test.com", "secret1")
        resp = client.post("/api/auth/login", json={"email": "owner@test.com", "password": "nope12"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid email or password"}

    def test_me(self, client):
        headers = signup(client, "owner@test.com")
        body = client.get("/api/auth/me", headers=headers).json()
        assert body["email"] == "owner@test.com"
        assert isinstance(body["_id"], int)


class TestSessionGate:
    def test_missing_token_is_401(self, client):
        assert client.get("/api/veiculos").status_code == 401

    def test_garbage_token_is_403(self, client):
        resp = client.get("/api/veiculos", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 403

    def test_expired_token_is_403(self, client, issuer):
        register(client, "owner@test.com", "secret1")
        user = SimpleNamespace(id=1, email="owner@test.com")
        token = issuer.issue(user, now=datetime.now(timezone.utc) - timedelta(hours=9))
        resp = client.get("/api/veiculos", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403

    def test_unauthenticated_request_has_no_side_effects(self, client):
        headers = signup(client, "owner@test.com")
        new_vehicle(client, {}, placa="ZZZ-0000")
        assert client.get("/api/veiculos", headers=headers).json() == []


class TestVehicleEndpoints:
    def test_create_normalizes_plate(self, client):
        headers = signup(client, "owner@test.com")
        resp = new_vehicle(client, headers, placa=" abc-1234 ")
        assert resp.status_code == 201
        body = resp.json()
        assert body["placa"] == "ABC-1234"
        assert body["owner"]["email"] == "owner@test.com"
        assert body["isOwner"] is True
        assert body["sharedWith"] == []

    def test_duplicate_plate_is_409_across_users(self, client):
        owner = signup(client, "owner@test.com")
        other = signup(client, "other@test.com")
        new_vehicle(client, owner)
        assert new_vehicle(client, other, placa="abc-1234").status_code == 409

    def test_invalid_year_is_400(self, client):
        headers = signup(client, "owner@test.com")
        resp = new_vehicle(client, headers, ano=1800)
        assert resp.status_code == 400
        assert "1900" in resp.json()["error"]

    def test_overlong_fields_are_400(self, client):
        headers = signup(client, "owner@test.com")
        assert new_vehicle(client, headers, placa="A" * 21).status_code == 400
        assert new_vehicle(client, headers, marca="M" * 101).status_code == 400
        resp = new_vehicle(client, headers, cor="C" * 51)
        assert resp.status_code == 400
        assert "cor" in resp.json()["error"]

        vehicle_id = new_vehicle(client, headers).json()["_id"]
        resp = client.put(f"/api/veiculos/{vehicle_id}", json={"modelo": "X" * 101}, headers=headers)
        assert resp.status_code == 400

    def test_stranger_gets_404(self, client):
        owner = signup(client, "owner@test.com")
        stranger = signup(client, "stranger@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        assert client.get(f"/api/veiculos/{vehicle_id}", headers=stranger).status_code == 404
        assert client.delete(f"/api/veiculos/{vehicle_id}", headers=stranger).status_code == 404

    def test_owner_updates_and_viewer_is_forbidden(self, client):
        owner = signup(client, "owner@test.com")
        friend = signup(client, "friend@test.com", "secret2")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        client.post(f"/api/veiculos/{vehicle_id}/share", json={"email": "friend@test.com"}, headers=owner)

        resp = client.put(f"/api/veiculos/{vehicle_id}", json={"cor": "Preto"}, headers=owner)
        assert resp.status_code == 200
        assert resp.json()["cor"] == "Preto"
        assert client.put(f"/api/veiculos/{vehicle_id}", json={"cor": "Rosa"}, headers=friend).status_code == 403

    def test_share_errors(self, client):
        owner = signup(client, "owner@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        share = f"/api/veiculos/{vehicle_id}/share"

        assert client.post(share, json={"email": "owner@test.com"}, headers=owner).status_code == 400
        assert client.post(share, json={"email": "ghost@test.com"}, headers=owner).status_code == 404
        assert client.post("/api/veiculos/999/share", json={"email": "x@test.com"},
                           headers=owner).status_code == 404

    def test_unshare(self, client):
        owner = signup(client, "owner@test.com")
        friend = signup(client, "friend@test.com", "secret2")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        client.post(f"/api/veiculos/{vehicle_id}/share", json={"email": "friend@test.com"}, headers=owner)
        friend_id = client.get("/api/auth/me", headers=friend).json()["_id"]

        resp = client.delete(f"/api/veiculos/{vehicle_id}/share/{friend_id}", headers=owner)
        assert resp.status_code == 200
        assert client.get("/api/veiculos", headers=friend).json() == []


class TestMaintenanceEndpoints:
    def test_create_and_list(self, client):
        owner = signup(client, "owner@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        url = f"/api/veiculos/{vehicle_id}/manutencoes"

        client.post(url, json={"descricaoServico": "Old", "custo": 10,
                               "data": "2024-01-10T09:00:00"}, headers=owner)
        resp = client.post(url, json={"descricaoServico": "New", "custo": 99.5, "quilometragem": 42000},
                           headers=owner)
        assert resp.status_code == 201
        created = resp.json()
        assert created["veiculo"] == vehicle_id
        assert created["quilometragem"] == 42000

        listed = client.get(url, headers=owner).json()
        assert [r["descricaoServico"] for r in listed] == ["New", "Old"]

    def test_negative_cost_is_400(self, client):
        owner = signup(client, "owner@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        resp = client.post(f"/api/veiculos/{vehicle_id}/manutencoes",
                           json={"descricaoServico": "Oil", "custo": -1}, headers=owner)
        assert resp.status_code == 400

    def test_non_finite_cost_is_400(self, client):
        owner = signup(client, "owner@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        url = f"/api/veiculos/{vehicle_id}/manutencoes"
        headers = {**owner, "Content-Type": "application/json"}

        for body in ('{"descricaoServico": "Oil", "custo": NaN}',
                     '{"descricaoServico": "Oil", "custo": Infinity}',
                     '{"descricaoServico": "Oil", "custo": 10, "quilometragem": NaN}'):
            resp = client.post(url, content=body, headers=headers)
            assert resp.status_code == 400, body
            assert "error" in resp.json()
        assert client.get(url, headers=owner).json() == []

    def test_dates_with_offsets_are_ordered_by_instant(self, client):
        owner = signup(client, "owner@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        url = f"/api/veiculos/{vehicle_id}/manutencoes"

        # A is 05:00 UTC, B is 08:00 UTC
        client.post(url, json={"descricaoServico": "A", "custo": 1,
                               "data": "2024-01-01T10:00:00+05:00"}, headers=owner)
        client.post(url, json={"descricaoServico": "B", "custo": 1,
                               "data": "2024-01-01T08:00:00Z"}, headers=owner)

        listed = client.get(url, headers=owner).json()
        assert [r["descricaoServico"] for r in listed] == ["B", "A"]
        assert listed[1]["data"].startswith("2024-01-01T05:00:00")

    def test_delete_requires_access_to_vehicle(self, client):
        owner = signup(client, "owner@test.com")
        stranger = signup(client, "stranger@test.com")
        vehicle_id = new_vehicle(client, owner).json()["_id"]
        record_id = client.post(f"/api/veiculos/{vehicle_id}/manutencoes",
                                json={"descricaoServico": "Oil", "custo": 10}, headers=owner).json()["_id"]

        assert client.delete(f"/api/manutencoes/{record_id}", headers=stranger).status_code == 404
        assert client.delete(f"/api/manutencoes/{record_id}", headers=owner).status_code == 200
        assert client.delete(f"/api/manutencoes/{record_id}", headers=owner).status_code == 404


class TestForecastEndpoint:
    def test_forecast_passthrough(self, client):
        with patch("garage.routers.forecast.fetch_forecast", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = {"city": {"name": "Curitiba"}}
            resp = client.get("/api/previsao/Curitiba")
        assert resp.status_code == 200
        assert resp.json()["city"]["name"] == "Curitiba"

    def test_forecast_error_status_preserved(self, client):
        with patch("garage.routers.forecast.fetch_forecast", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.side_effect = UpstreamError("Failed to fetch forecast: city not found", status_code=404)
            resp = client.get("/api/previsao/Atlantis")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Failed to fetch forecast: city not found"}

    def test_missing_api_key_is_generic_500(self, client, monkeypatch):
        monkeypatch.setattr(settings, "OPENWEATHER_API_KEY", None)
        resp = client.get("/api/previsao/Curitiba")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"


def test_sharing_walkthrough(client):
    owner = signup(client, "owner@test.com", "secret1")
    friend = signup(client, "friend@test.com", "secret2")

    created = new_vehicle(client, owner, placa="ABC-1234")
    assert created.status_code == 201
    vehicle_id = created.json()["_id"]

    shared = client.post(f"/api/veiculos/{vehicle_id}/share", json={"email": "friend@test.com"}, headers=owner)
    assert shared.status_code == 200

    listed = client.get("/api/veiculos", headers=friend).json()
    assert len(listed) == 1
    assert listed[0]["owner"]["email"] == "owner@test.com"
    assert listed[0]["isOwner"] is False

    record = client.post(f"/api/veiculos/{vehicle_id}/manutencoes",
                         json={"descricaoServico": "Troca de oleo", "custo": 50, "quilometragem": 100},
                         headers=friend)
    assert record.status_code == 201

    reshare = client.post(f"/api/veiculos/{vehicle_id}/share", json={"email": "owner@test.com"}, headers=friend)
    assert reshare.status_code == 403

    assert client.delete(f"/api/veiculos/{vehicle_id}", headers=owner).status_code == 200
    assert client.get("/api/veiculos", headers=friend).json() == []
    assert client.get(f"/api/veiculos/{vehicle_id}/manutencoes", headers=friend).status_code == 404
