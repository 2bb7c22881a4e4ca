"""Registration, login and two-factor enrollment routes."""
import logging
import random

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from journal.database import get_db
from journal.dependencies import get_clock, get_current_claims, get_notifier, get_rng
from journal.exceptions import InvalidCredentials, ValidationError
from journal.schemas.auth import Claims, LoginRequest, LoginResponse, RegisterRequest, SuccessResponse
from journal.services import credential_service, session_service, verification_service
from journal.services.notifier import Notifier
from journal.timeutil import Clock

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=SuccessResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account with the default ``user`` role."""
    credential_service.register(db, payload.email, payload.password)
    return SuccessResponse()


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Exchange credentials (and a code, when two-factor is on) for a token."""
    if not payload.email or not payload.password:
        raise ValidationError("Email and password required")

    user = credential_service.verify(db, payload.email, payload.password)

    if user.two_factor_enabled:
        code = payload.verification_code
        if code is None or not verification_service.verify(db, user.id, str(code), clock()):
            logger.info("Login for user %s rejected: missing or invalid verification code", user.id)
            raise InvalidCredentials()

    token = session_service.issue(user, clock())
    logger.info("User %s logged in", user.id)
    return LoginResponse(token=token, role=user.role)


@router.post("/enable-2fa", response_model=SuccessResponse)
def enable_two_factor(
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    rng: random.Random = Depends(get_rng),
    clock: Clock = Depends(get_clock),
):
    """Send a verification code and switch two-factor on once it is delivered."""
    user = credential_service.get_user(db, claims.id)
    verification_service.enable_two_factor(db, user, notifier, rng, clock())
    return SuccessResponse()
