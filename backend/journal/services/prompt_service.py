"""Prompt selector and seed data."""
import logging
import random

from sqlalchemy import or_
from sqlalchemy.orm import Session

from journal.exceptions import NoPromptAvailable
from journal.models.prompt import Prompt

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS = [
    "What made you smile today? 😊",
    "What's a new thing you learned recently?",
    "What's a goal you're excited about?",
    "What's a memory that makes you happy?",
    "What's something you're grateful for today?",
]


def _eligible(user_id: int):
    return or_(Prompt.user_id.is_(None), Prompt.user_id == user_id)


def get_eligible_prompt(db: Session, user_id: int, prompt_id: int):
    """Return the prompt if it exists and is global or owned by ``user_id``."""
    return db.query(Prompt).filter(Prompt.id == prompt_id, _eligible(user_id)).first()


def pick(db: Session, user_id: int, rng: random.Random) -> Prompt:
    """Uniformly sample one prompt from the global pool plus the user's own."""
    candidates = db.query(Prompt).filter(_eligible(user_id)).order_by(Prompt.id).all()
    if not candidates:
        raise NoPromptAvailable()
    return rng.choice(candidates)


def seed_prompts(db: Session) -> int:
    """Insert the global prompts if the prompt table is empty.

    Returns the number of prompts inserted.
    """
    if db.query(Prompt.id).first() is not None:
        return 0
    db.add_all([Prompt(text=text, user_id=None) for text in DEFAULT_PROMPTS])
    db.commit()
    logger.info("Seeded %d global prompts", len(DEFAULT_PROMPTS))
    return len(DEFAULT_PROMPTS)
