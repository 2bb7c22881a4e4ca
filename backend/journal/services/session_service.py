"""Session issuer: signed, time-limited bearer tokens.

Tokens are HS256 JWTs holding the user's id, email and role. They are
verified without touching the database, so role changes only take effect
once the old token expires.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from journal.config import INSECURE_DEFAULT_SECRET, settings
from journal.exceptions import Forbidden, Unauthorized
from journal.models.user import User
from journal.schemas.auth import Claims
from journal.timeutil import to_utc, utcnow

logger = logging.getLogger(__name__)


def warn_if_insecure_secret() -> None:
    if settings.JWT_SECRET_KEY == INSECURE_DEFAULT_SECRET:
        logger.warning("JWT_SECRET_KEY is the built-in default; set a private value in production")


def issue(user: User, now: Optional[datetime] = None) -> str:
    """Mint a token for ``user`` that expires a fixed time after ``now``."""
    issued_at = to_utc(now) if now is not None else utcnow()
    expire = issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def authenticate(token: Optional[str]) -> Claims:
    """Resolve a bearer token to its claims.

    Raises:
        Unauthorized: No token was presented.
        Forbidden: The token is malformed, expired or wrongly signed.
    """
    if not token:
        raise Unauthorized()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return Claims(id=payload["id"], email=payload["email"], role=payload["role"])
    except (JWTError, KeyError, PydanticValidationError):
        logger.info("Rejected bearer token")
        raise Forbidden("Invalid token")
