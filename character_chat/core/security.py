import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pydantic import BaseModel

from character_chat.core.config import settings
from character_chat.core.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)


class Identity(BaseModel):
    """The authenticated caller, threaded explicitly into every service operation."""
    user_id: str
    email: Optional[str] = None

    class Config:
        frozen = True


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode. Must contain "sub" with the user id.
        expires_delta: Optional lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: The encoded token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        UnauthenticatedError: If the token is expired, malformed or has no subject
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise UnauthenticatedError("Token has expired")
    except JWTError as e:
        logger.warning(f"Rejected invalid access token: {e}")
        raise UnauthenticatedError("Could not validate credentials")

    if not payload.get("sub"):
        raise UnauthenticatedError("Invalid token: missing user ID")
    return payload


def identity_from_token(token: str) -> Identity:
    payload = verify_token(token)
    return Identity(user_id=payload["sub"], email=payload.get("email"))


def require_identity(identity: Optional[Identity]) -> Identity:
    """Return the identity or raise UnauthenticatedError when there is none."""
    if identity is None:
        raise UnauthenticatedError()
    return identity
