from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from heweather.core.config import Settings
from heweather.core.errors import ConfigurationError
from heweather.core.security import API_KEY_HEADER, CredentialProvider, create_qweather_token


@pytest.fixture()
def ed25519_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


def _pem(key: Ed25519PrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def _jwt_settings(private_key: str, **overrides) -> Settings:
    values = {
        "_env_file": None,
        "qweather_use_jwt": True,
        "qweather_jwt_sub": "project-123",
        "qweather_jwt_kid": "kid-abc",
        "qweather_jwt_private_key": private_key,
    }
    values.update(overrides)
    return Settings(**values)


def test_static_api_key_is_used_directly() -> None:
    provider = CredentialProvider(Settings(_env_file=None, qweather_apikey="secret-key"))
    assert provider.headers() == {API_KEY_HEADER: "secret-key"}


def test_api_key_wins_over_jwt(ed25519_key: Ed25519PrivateKey) -> None:
    settings = _jwt_settings(_pem(ed25519_key), qweather_apikey="secret-key")
    assert CredentialProvider(settings).headers() == {API_KEY_HEADER: "secret-key"}


def test_signed_token(ed25519_key: Ed25519PrivateKey) -> None:
    provider = CredentialProvider(_jwt_settings(_pem(ed25519_key)))
    header = provider.headers()["Authorization"]
    assert header.startswith("Bearer ")
    token = header.removeprefix("Bearer ")

    unverified = jwt.get_unverified_header(token)
    assert unverified["alg"] == "EdDSA"
    assert unverified["kid"] == "kid-abc"

    claims = jwt.decode(token, ed25519_key.public_key(), algorithms=["EdDSA"])
    assert claims["sub"] == "project-123"
    assert claims["exp"] - claims["iat"] == 930


def test_token_timestamps() -> None:
    key = Ed25519PrivateKey.generate()
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    token = create_qweather_token(subject="p", key_id="k", private_key=_pem(key), now=now)
    claims = jwt.decode(
        token, key.public_key(), algorithms=["EdDSA"], options={"verify_exp": False, "verify_iat": False}
    )
    assert claims["iat"] == int(now.timestamp()) - 30
    assert claims["exp"] == int(now.timestamp()) + 900


def test_escaped_newlines_in_private_key(ed25519_key: Ed25519PrivateKey) -> None:
    escaped = _pem(ed25519_key).replace("\n", "\\n")
    provider = CredentialProvider(_jwt_settings(escaped))
    token = provider.headers()["Authorization"].removeprefix("Bearer ")
    assert jwt.decode(token, ed25519_key.public_key(), algorithms=["EdDSA"])["sub"] == "project-123"


@pytest.mark.parametrize(
    "missing", ["qweather_jwt_sub", "qweather_jwt_kid", "qweather_jwt_private_key"]
)
def test_missing_jwt_material(ed25519_key: Ed25519PrivateKey, missing: str) -> None:
    provider = CredentialProvider(_jwt_settings(_pem(ed25519_key), **{missing: None}))
    with pytest.raises(ConfigurationError):
        provider.headers()


def test_no_credential_configured() -> None:
    provider = CredentialProvider(Settings(_env_file=None, qweather_use_jwt=False))
    with pytest.raises(ConfigurationError):
        provider.headers()


def test_invalid_private_key() -> None:
    provider = CredentialProvider(_jwt_settings("not a pem key"))
    with pytest.raises(ConfigurationError):
        provider.headers()


def test_token_is_reused_until_close_to_expiry(ed25519_key: Ed25519PrivateKey) -> None:
    current = [datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)]
    provider = CredentialProvider(_jwt_settings(_pem(ed25519_key)), clock=lambda: current[0])

    first = provider.headers()
    current[0] += timedelta(minutes=5)
    assert provider.headers() == first

    current[0] += timedelta(minutes=10)
    assert provider.headers() != first
