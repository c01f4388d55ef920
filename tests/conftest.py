"""Shared test fixtures for the envelope test suite."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

from service_envelope.config.settings import EnvelopeSettings


# ---------------------------------------------------------------------------
# Keep the process environment from leaking into EnvelopeSettings
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_envelope_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ENVELOPE_* variables so settings tests start from defaults."""
    for key in (
        "ENVELOPE_LOG_LEVEL",
        "ENVELOPE_JWT_PUBLIC_KEY",
        "ENVELOPE_JWT_LEEWAY_SECONDS",
        "ENVELOPE_PUBLIC_PATHS",
        "ENVELOPE_TOKEN_ERROR_STATUS_CODES",
    ):
        monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# RSA keys and tokens
# ---------------------------------------------------------------------------

def _pem_pair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[str, str]:
    """(private PEM, public PEM) for signing test tokens."""
    return _pem_pair()


@pytest.fixture(scope="session")
def other_rsa_keys() -> tuple[str, str]:
    """A second key pair whose signatures must not verify."""
    return _pem_pair()


@pytest.fixture(scope="session")
def consumer_claims() -> dict[str, Any]:
    return {
        "id": 42,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "language": "en",
        "grants": ["products.read", "products.write"],
    }


@pytest.fixture(scope="session")
def make_token(
    rsa_keys: tuple[str, str], consumer_claims: dict[str, Any]
) -> Callable[..., str]:
    """Build an RS256 token; keyword arguments override or add claims."""
    private_pem, _ = rsa_keys

    def _make(
        *,
        key: str | None = None,
        algorithm: str = "RS256",
        with_consumer: bool = True,
        **claims: Any,
    ) -> str:
        now = int(time.time())
        payload: dict[str, Any] = {"iat": now, "exp": now + 300}
        if with_consumer:
            payload["consumer"] = consumer_claims
        payload.update(claims)
        return jwt.encode(payload, key or private_pem, algorithm=algorithm)

    return _make


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(rsa_keys: tuple[str, str]) -> EnvelopeSettings:
    """Test settings verifying tokens with the session key pair."""
    return EnvelopeSettings(jwt_public_key=rsa_keys[1])
