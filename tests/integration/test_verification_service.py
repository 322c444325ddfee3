"""Integration tests for the HTTP verification service."""

import inspect

import pytest
from fastapi.testclient import TestClient

from certcheck_service.main import app, verify

from ..utils.test_helpers import cert_to_pem, key_to_bytes


@pytest.fixture
def client():
    return TestClient(app)


def _payload(cert, chain, key) -> dict:
    return {
        "certificate": cert_to_pem(cert).decode(),
        "chain": cert_to_pem(chain).decode(),
        "private_key": key_to_bytes(key).decode(),
    }


class TestServiceEndpoints:
    """Test the service endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "operational"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_verify_consistent_set(self, client, server, issuer_ca):
        server_cert, server_key = server
        ca_cert, _ = issuer_ca

        response = client.post("/verify", json=_payload(server_cert, ca_cert, server_key))

        body = response.json()
        assert response.status_code == 200
        assert body["verified"] is True
        assert body["server"]["common_name"] == "www.example.com"
        assert body["intermediate"]["common_name"] == "Test Intermediate CA"
        assert body["chain_link"] == {"verified": True, "reason": ""}

    def test_verify_mismatched_key(self, client, server, issuer_ca, unrelated_key):
        server_cert, _ = server
        ca_cert, _ = issuer_ca

        response = client.post("/verify", json=_payload(server_cert, ca_cert, unrelated_key))

        body = response.json()
        assert response.status_code == 200
        assert body["verified"] is False
        assert body["key_pair"]["verified"] is False
        assert body["key_pair"]["reason"] == "signature verification failed"

    def test_verify_undecodable_key(self, client, server, issuer_ca):
        server_cert, server_key = server
        ca_cert, _ = issuer_ca
        payload = _payload(server_cert, ca_cert, server_key)
        payload["private_key"] = "not a key"

        response = client.post("/verify", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Failed to decode private key:")

    def test_verify_runs_in_threadpool(self):
        """Test the signing endpoint is synchronous so it stays off the event loop."""
        assert not inspect.iscoroutinefunction(verify)

    def test_verify_missing_field(self, client):
        response = client.post("/verify", json={"certificate": ""})

        assert response.status_code == 422
