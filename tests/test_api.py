"""
Тесты HTTP API реестра
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from star_registry.crypto.message import sign_message
from star_registry.dependencies import get_ledger
from star_registry.main import app


@pytest.fixture
def client(ledger):
    """Клиент API с отдельной цепочкой"""
    app.dependency_overrides[get_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def request_message(client, address):
    response = client.post("/api/v1/requestValidation", json={"address": address})
    assert response.status_code == 200
    return response.json()["message"]


class TestServiceEndpoints:
    """Служебные эндпоинты"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Star Registry"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestLedgerApi:
    """Эндпоинты цепочки"""

    def test_height(self, client):
        assert client.get("/api/v1/height").json() == {"height": 0}

    def test_genesis_by_height(self, client, ledger):
        response = client.get("/api/v1/block/height/0")

        assert response.status_code == 200
        data = response.json()
        assert data["height"] == 0
        assert data["previousHash"] is None
        assert data["hash"] == ledger.chain[0].hash
        assert data["body"] == ledger.chain[0].body

    def test_block_not_found(self, client):
        assert client.get("/api/v1/block/height/5").status_code == 404
        assert client.get(f"/api/v1/block/hash/{'0' * 64}").status_code == 404

    def test_request_validation(self, client, wallet_address, clock):
        assert request_message(client, wallet_address) == f"{wallet_address}:{clock.now}:starRegistry"

    def test_request_validation_requires_address(self, client):
        assert client.post("/api/v1/requestValidation", json={}).status_code == 422

    def test_submit_and_query_star(self, client, clock, signing_key, wallet_address, sample_star):
        message = request_message(client, wallet_address)
        clock.advance(30)

        response = client.post("/api/v1/submitstar", json={
            "address": wallet_address,
            "message": message,
            "signature": sign_message(signing_key, message),
            "star": sample_star,
        })

        assert response.status_code == 201
        block = response.json()
        assert block["height"] == 1

        by_hash = client.get(f"/api/v1/block/hash/{block['hash']}")
        assert by_hash.status_code == 200
        assert by_hash.json() == block

        stars = client.get(f"/api/v1/blocks/{wallet_address}").json()
        assert stars == [{"owner": wallet_address, "star": sample_star}]

        assert client.get("/api/v1/validateChain").json() == {"valid": True, "errors": []}

    def test_submit_expired(self, client, clock, signing_key, wallet_address, sample_star):
        message = request_message(client, wallet_address)
        clock.advance(301)

        response = client.post("/api/v1/submitstar", json={
            "address": wallet_address,
            "message": message,
            "signature": sign_message(signing_key, message),
            "star": sample_star,
        })

        assert response.status_code == 400
        assert client.get("/api/v1/height").json() == {"height": 0}

    def test_submit_bad_signature(self, client, other_signing_key, wallet_address, sample_star):
        message = request_message(client, wallet_address)

        response = client.post("/api/v1/submitstar", json={
            "address": wallet_address,
            "message": message,
            "signature": sign_message(other_signing_key, message),
            "star": sample_star,
        })

        assert response.status_code == 401

    def test_submit_requires_star_coordinates(self, client, signing_key, wallet_address):
        message = request_message(client, wallet_address)

        response = client.post("/api/v1/submitstar", json={
            "address": wallet_address,
            "message": message,
            "signature": sign_message(signing_key, message),
            "star": {"story": "no coordinates"},
        })

        assert response.status_code == 422

    def test_validate_tampered_chain(self, client, ledger):
        ledger.chain[0].time = 0

        report = client.get("/api/v1/validateChain").json()
        assert report["valid"] is False
        assert report["errors"] == ["Block of height 0 data has been changed."]

    def test_corrupt_block_in_owner_query(self, client, ledger, wallet_address):
        asyncio.run(ledger.append_block({"owner": wallet_address, "star": {}}))
        ledger.chain[1].body = "1:zz"

        assert client.get(f"/api/v1/blocks/{wallet_address}").status_code == 500


def test_lifespan_with_chain_audit(test_settings, ledger):
    """Фоновый аудит запускается и корректно останавливается"""
    test_settings.chain_audit_enabled = True
    test_settings.chain_audit_interval = 60

    app.dependency_overrides[get_ledger] = lambda: ledger
    try:
        with TestClient(app) as test_client:
            assert test_client.get("/api/v1/height").status_code == 200
    finally:
        app.dependency_overrides.clear()
