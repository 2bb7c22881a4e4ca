"""Journal entry routes: submit, edit check and paged listing."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from journal.database import get_db
from journal.dependencies import get_clock, get_current_claims
from journal.exceptions import ValidationError
from journal.schemas.auth import Claims, SuccessResponse
from journal.schemas.entry import CanEditOut, EntryPage, SubmitRequest
from journal.services import entry_service
from journal.timeutil import Clock

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/answer/{answer_id}/can-edit", response_model=CanEditOut)
def can_edit(
    answer_id: int,
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Whether the caller may still edit this entry today."""
    return CanEditOut(can_edit=entry_service.editable_now(db, answer_id, claims.id, clock()))


@router.post("/submit", response_model=SuccessResponse)
def submit(
    payload: SubmitRequest,
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create an entry, or edit one when ``answer_id`` is given."""
    if not payload.text or not payload.question_id:
        raise ValidationError("Text and question_id required")

    if payload.answer_id is None:
        entry_service.submit(db, claims.id, payload.question_id, payload.text, clock())
    else:
        entry_service.update(db, payload.answer_id, claims.id, payload.text, clock())
    return SuccessResponse()


@router.get("/entries", response_model=EntryPage)
def list_entries(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None),
    search_type: str = Query(entry_service.SEARCH_ALL, alias="searchType"),
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """List the caller's entries, newest first, with optional search."""
    result = entry_service.list_entries(
        db,
        claims.id,
        page=page,
        limit=limit,
        search=search,
        search_type=search_type,
    )
    return EntryPage(**result)
