"""Unit tests for the bearer token middleware."""

from __future__ import annotations

import logging
import time

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from service_envelope.auth.jwt import TokenErrorKind
from service_envelope.config.settings import EnvelopeSettings
from service_envelope.constructors import new
from service_envelope.middleware.auth import BearerAuthMiddleware
from service_envelope.middleware.error_handler import register_error_handlers
from service_envelope.models.data import Data


def _make_app(settings: EnvelopeSettings) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, settings.token_error_status_codes)

    @app.get("/health")
    async def _health():
        return new(200, "healthy").to_response()

    @app.get("/me")
    async def _me(request: Request):
        consumer = request.state.claims.consumer
        return new(200, "", Data(type="consumers", content=consumer.model_dump())).to_response()

    app.add_middleware(BearerAuthMiddleware, settings=settings)
    return app


@pytest.fixture()
def client(settings: EnvelopeSettings) -> TestClient:
    return TestClient(_make_app(settings), raise_server_exceptions=False)


class TestBearerAuthMiddleware:
    def test_public_path_needs_no_token(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_valid_token_exposes_claims(self, client, make_token):
        resp = client.get("/me", headers={"Authorization": f"Bearer {make_token()}"})
        assert resp.status_code == 200
        assert resp.json()["data"]["consumers"]["id"] == 42

    def test_missing_header(self, client):
        resp = client.get("/me")
        assert resp.status_code == 401
        assert resp.json() == {"status": "fail", "code": 401, "message": "missing bearer token"}

    def test_non_bearer_scheme(self, client, make_token):
        resp = client.get("/me", headers={"Authorization": f"Basic {make_token()}"})
        assert resp.status_code == 401

    def test_malformed_token(self, client):
        resp = client.get("/me", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 422
        assert resp.json()["message"] == "token malformed"

    def test_expired_token(self, client, make_token):
        token = make_token(exp=int(time.time()) - 60)
        resp = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "token expired or not yet valid"

    def test_claims_without_consumer(self, client, make_token):
        token = make_token(with_consumer=False)
        resp = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "invalid token claims"

    def test_mapping_comes_from_settings(self, rsa_keys):
        settings = EnvelopeSettings(
            jwt_public_key=rsa_keys[1],
            token_error_status_codes={kind: 403 for kind in TokenErrorKind},
        )
        client = TestClient(_make_app(settings), raise_server_exceptions=False)
        resp = client.get("/me", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 403

    def test_failure_is_logged_without_token(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="service_envelope.middleware.auth"):
            client.get("/me", headers={"Authorization": "Bearer garbage"})
        records = [r for r in caplog.records if getattr(r, "event", None) == "auth_failure"]
        assert records
        assert records[0].reason == "malformed"
        assert "garbage" not in records[0].getMessage()

    def test_public_key_is_required(self):
        app = FastAPI()
        app.add_middleware(BearerAuthMiddleware, settings=EnvelopeSettings())
        with pytest.raises(ValueError):
            TestClient(app).get("/health")
