"""Startup data: global prompts and the optional configured admin."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from journal.config import Settings
from journal.models.user import Role, User
from journal.services import credential_service, prompt_service

logger = logging.getLogger(__name__)


def ensure_admin(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Create the configured admin account unless the email is already taken."""
    if not email or not password:
        return None
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        if existing.role != Role.admin:
            logger.warning("ADMIN_EMAIL %s belongs to a non-admin user; leaving it unchanged", email)
        return existing
    admin = credential_service.register(db, email, password, role=Role.admin)
    logger.info("Created admin account %s", email)
    return admin


def seed(db: Session, config: Settings) -> None:
    prompt_service.seed_prompts(db)
    ensure_admin(db, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
