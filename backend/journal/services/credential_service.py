"""Credential store: user registration and password verification."""
import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journal.config import settings
from journal.exceptions import DuplicateEmail, InvalidCredentials, ValidationError
from journal.models.user import Role, User

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """One-way bcrypt hash of ``password``."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def register(db: Session, email: str, password: str, role: Role = Role.user) -> User:
    """Create a user with a hashed password.

    Emails are matched exactly (case-sensitive). A concurrent insert of the
    same email is caught by the unique constraint and reported the same way.
    """
    if not email or not password:
        raise ValidationError("Email and password required")

    if db.query(User.id).filter(User.email == email).first():
        raise DuplicateEmail()

    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        two_factor_enabled=False,
        two_factor_secret=None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmail() from exc
    db.refresh(user)
    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return user


def verify(db: Session, email: str, password: str) -> User:
    """Return the user for a correct email/password pair.

    Unknown email and wrong password fail identically.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None or not check_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise InvalidCredentials()
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()
