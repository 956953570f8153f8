from datetime import datetime, timedelta, timezone

import jwt
import pytest

from freelance_booking.core.config import settings
from freelance_booking.core.security import create_access_token, decode_access_token


def test_token_round_trip_carries_identity() -> None:
    token = create_access_token("user-1", email="user@example.com", display_name="Casey")

    claims = decode_access_token(token)

    assert claims["sub"] == "user-1"
    assert claims["email"] == "user@example.com"
    assert claims["user_metadata"] == {"display_name": "Casey"}
    assert claims["aud"] == settings.jwt_audience


def test_expired_token_rejected() -> None:
    token = create_access_token("user-1", expires_delta=timedelta(seconds=-5))

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_wrong_secret_rejected() -> None:
    token = jwt.encode(
        {
            "sub": "user-1",
            "aud": settings.jwt_audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        "not-the-secret",
        algorithm="HS256",
    )

    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(token)


def test_wrong_audience_rejected() -> None:
    token = jwt.encode(
        {
            "sub": "user-1",
            "aud": "someone-else",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(jwt.InvalidAudienceError):
        decode_access_token(token)


def test_audience_check_can_be_disabled(monkeypatch) -> None:
    monkeypatch.setattr(settings, "jwt_audience", None)
    token = jwt.encode(
        {"sub": "user-1", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )

    assert decode_access_token(token)["sub"] == "user-1"


def test_subject_is_required() -> None:
    token = jwt.encode(
        {"aud": settings.jwt_audience, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(jwt.MissingRequiredClaimError):
        decode_access_token(token)
