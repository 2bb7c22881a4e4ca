"""Verification gate: time-limited one-time codes for the second factor.

Codes are never deleted. A code stops working once ``expires_at`` is
reached; several outstanding codes per user may be valid at once.
"""
import logging
import random
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from journal.config import settings
from journal.exceptions import NotifierError
from journal.models.user import User
from journal.models.verification_code import VerificationCode
from journal.services.notifier import Notifier
from journal.timeutil import to_utc

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


def generate_code(rng: random.Random) -> str:
    return str(rng.randint(CODE_MIN, CODE_MAX))


def issue(
    db: Session,
    user: User,
    notifier: Notifier,
    rng: random.Random,
    now: datetime,
) -> str:
    """Persist a fresh code for ``user`` and hand it to the notifier.

    The code row is committed before delivery, so it stays valid even when
    delivery fails. Delivery failures surface as NotifierError.
    """
    code = generate_code(rng)
    record = VerificationCode(
        user_id=user.id,
        code=code,
        expires_at=to_utc(now) + timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES),
    )
    db.add(record)
    db.commit()
    logger.info("Issued verification code %s for user %s", record.id, user.id)

    try:
        notifier.send_verification_code(user.email, code)
    except NotifierError:
        raise
    except Exception as exc:
        logger.exception("Notifier failed for user %s", user.id)
        raise NotifierError() from exc
    return code


def verify(db: Session, user_id: int, code: str, now: datetime) -> bool:
    """True iff ``code`` matches an unexpired code of ``user_id``.

    ``expires_at`` must be strictly after ``now``.
    """
    if not code:
        return False
    match = (
        db.query(VerificationCode.id)
        .filter(
            VerificationCode.user_id == user_id,
            VerificationCode.code == str(code),
            VerificationCode.expires_at > to_utc(now),
        )
        .order_by(VerificationCode.id.desc())
        .first()
    )
    return match is not None


def enable_two_factor(
    db: Session,
    user: User,
    notifier: Notifier,
    rng: random.Random,
    now: datetime,
) -> User:
    """Send a code to ``user`` and turn two-factor on once delivery succeeds."""
    issue(db, user, notifier, rng, now)
    user.two_factor_enabled = True
    db.commit()
    db.refresh(user)
    logger.info("Enabled two-factor verification for user %s", user.id)
    return user
