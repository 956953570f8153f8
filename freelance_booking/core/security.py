# freelance_booking/core/security.py
"""
Bearer credential handling.

Access tokens follow the identity provider's shape: ``sub`` is the user
id, ``email`` the address, and ``user_metadata.display_name`` the name
chosen at sign-up.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

import jwt

from .config import settings

logger = logging.getLogger(__name__)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify an access token.

    Raises:
        jwt.PyJWTError: Bad signature, expired, wrong audience or malformed
    """
    secret = _secret_value(settings.jwt_secret)
    if settings.jwt_audience:
        payload_raw = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    else:
        payload_raw = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False, "require": ["sub", "exp"]},
        )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    display_name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token for ``user_id``.

    Args:
        user_id: Value of the ``sub`` claim
        email: Optional email claim
        display_name: Optional ``user_metadata.display_name``
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode: Dict[str, Any] = {"sub": user_id, "iat": now, "exp": expire}
    if email:
        to_encode["email"] = email
    if display_name:
        to_encode["user_metadata"] = {"display_name": display_name}
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience

    encoded_jwt = cast(
        str,
        jwt.encode(to_encode, _secret_value(settings.jwt_secret), algorithm=settings.jwt_algorithm),
    )
    logger.debug(f"Created access token for user: {user_id}")
    return encoded_jwt
