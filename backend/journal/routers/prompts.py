"""Daily prompt route."""
import random

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from journal.database import get_db
from journal.dependencies import get_current_claims, get_rng
from journal.schemas.auth import Claims
from journal.schemas.prompt import PromptOut
from journal.services import prompt_service

router = APIRouter()


@router.get("/question", response_model=PromptOut)
def get_question(
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_rng),
):
    """Return a random prompt from the global pool or the caller's own."""
    return prompt_service.pick(db, claims.id, rng)
