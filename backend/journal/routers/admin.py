"""Administrator-only routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from journal.database import get_db
from journal.dependencies import require_admin
from journal.schemas.auth import Claims
from journal.schemas.user import UserOut
from journal.services import credential_service

router = APIRouter()


@router.get("/users", response_model=list[UserOut])
def list_users(claims: Claims = Depends(require_admin), db: Session = Depends(get_db)):
    """List every registered user."""
    return credential_service.list_users(db)
