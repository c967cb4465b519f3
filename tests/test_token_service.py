import time
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from storefront.domain.errors import ErrorKind, UnauthorizedError
from storefront.services.token_service import TokenService, TokenType


def test_generated_token_carries_claims(token_service):
    now = int(time.time())

    token = token_service.generate_token(42, now + 3600, TokenType.ACCESS)

    payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
    assert payload["sub"] == "42"
    assert payload["exp"] == now + 3600
    assert payload["type"] == "ACCESS"
    assert abs(payload["iat"] - now) <= 1


def test_token_valid_until_expiry(token_service):
    now = int(time.time())
    token = token_service.generate_token(7, now + 3600, "ACCESS")

    payload = token_service.verify_token(token, TokenType.ACCESS, now=now + 3600 - 1)
    assert payload["sub"] == "7"

    with pytest.raises(UnauthorizedError):
        token_service.verify_token(token, TokenType.ACCESS, now=now + 3601)


def test_token_expired_exactly_at_exp(token_service):
    now = int(time.time())
    token = token_service.generate_token(7, now + 60, "ACCESS")

    with pytest.raises(UnauthorizedError):
        token_service.verify_token(token, now=now + 60)


def test_explicit_secret_overrides_config(token_service):
    now = int(time.time())
    token = token_service.generate_token(1, now + 60, "ACCESS", secret="other-secret")

    with pytest.raises(UnauthorizedError) as exc:
        token_service.verify_token(token)
    assert exc.value.kind is ErrorKind.UNAUTHORIZED

    assert token_service.verify_token(token, secret="other-secret")["sub"] == "1"


def test_tampered_token_is_rejected(token_service):
    now = int(time.time())
    header, _, signature = token_service.generate_token(1, now + 60, "ACCESS").split(".")
    forged = jwt.encode({"sub": "2", "iat": now, "exp": now + 60, "type": "ACCESS"}, "x", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        token_service.verify_token(".".join([header, forged.split(".")[1], signature]))


def test_other_token_type_is_rejected(token_service):
    now = int(time.time())
    token = jwt.encode(
        {"sub": "1", "iat": now, "exp": now + 60, "type": "REFRESH"},
        "test-secret",
        algorithm="HS256",
    )

    with pytest.raises(UnauthorizedError):
        token_service.verify_token(token, TokenType.ACCESS)


def test_refresh_token_is_signed_but_not_accepted_as_access(token_service):
    token = token_service.generate_token(1, int(time.time()) + 60, "REFRESH")

    assert jwt.decode(token, "test-secret", algorithms=["HS256"])["type"] == "REFRESH"
    with pytest.raises(UnauthorizedError):
        token_service.verify_token(token, TokenType.ACCESS)


def test_auth_tokens_use_configured_lifetime(config):
    service = TokenService(config)
    before = datetime.now(timezone.utc)

    tokens = service.generate_auth_tokens(SimpleNamespace(id=5))

    access = tokens["access"]
    expires = datetime.fromisoformat(access["expires"])
    expected = before + timedelta(minutes=config.access_expiration_minutes)
    assert abs((expires - expected).total_seconds()) <= 2

    payload = service.verify_token(access["token"])
    assert payload["sub"] == "5"
    assert payload["exp"] == int(expires.timestamp())
