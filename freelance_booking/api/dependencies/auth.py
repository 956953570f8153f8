# freelance_booking/api/dependencies/auth.py
"""
Authentication dependencies.

The caller's identity is resolved from the bearer credential before any
domain logic runs and is then passed explicitly into every service call.
"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlalchemy.orm import Session

from ...core.exceptions import UnauthenticatedException
from ...core.security import decode_access_token
from ...models.profile import Profile
from .database import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Resolved caller identity."""

    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


def _token_display_name(claims: Dict[str, Any]) -> Optional[str]:
    metadata = claims.get("user_metadata")
    if isinstance(metadata, dict):
        name = metadata.get("display_name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthenticatedUser:
    """
    Resolve the authenticated caller.

    Display name preference: profile row, then token metadata, then email.

    Raises:
        UnauthenticatedException: Missing, malformed, expired or rejected token
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedException()

    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token", extra={"reason": exc.__class__.__name__})
        raise UnauthenticatedException() from exc

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthenticatedException()

    email = claims.get("email") if isinstance(claims.get("email"), str) else None
    profile = db.get(Profile, user_id)
    display_name = (
        (profile.display_name if profile is not None else None)
        or _token_display_name(claims)
        or email
    )
    return AuthenticatedUser(user_id=user_id, email=email, display_name=display_name)
