"""FastAPI dependencies shared by the routers."""
import random
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from journal.models.user import Role
from journal.schemas.auth import Claims
from journal.services import access_policy, session_service
from journal.services.notifier import Notifier
from journal.timeutil import Clock, utcnow

# auto_error=False so a missing token becomes our own 401
bearer_scheme = HTTPBearer(auto_error=False)

_system_random = random.SystemRandom()


def get_clock() -> Clock:
    return utcnow


def get_rng() -> random.Random:
    return _system_random


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Claims:
    """Resolve the request's bearer token to the caller's claims."""
    token = credentials.credentials if credentials else None
    return session_service.authenticate(token)


def require_admin(claims: Claims = Depends(get_current_claims)) -> Claims:
    access_policy.require_role(claims, Role.admin)
    return claims
