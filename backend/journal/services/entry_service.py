"""Entry ledger: journal answers, the same-day edit window, and paged search.

Rules enforced here:
- Only the owner may see or edit an entry. Missing and foreign entries are
  reported identically as NotFound.
- An entry is editable only while the current UTC date equals the date
  part of its ``created_at``. Edits never move ``created_at``.
- Listings are newest first, ties in insertion order, and the total is
  counted with the same filter as the page.
"""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from journal.exceptions import EditWindowClosed, NotFound, ValidationError
from journal.models.entry import Entry
from journal.models.prompt import Prompt
from journal.services import prompt_service
from journal.timeutil import format_timestamp, parse_timestamp, utc_date

logger = logging.getLogger(__name__)

FIRST_PAGE_SIZE = 6
NEXT_PAGE_SIZE = 3

SEARCH_KEYWORD = "keyword"
SEARCH_QUESTION = "question"
SEARCH_DATE = "date"
SEARCH_ALL = "all"


def _get_owned(db: Session, entry_id: int, user_id: int) -> Entry:
    entry = db.query(Entry).filter(Entry.id == entry_id, Entry.user_id == user_id).first()
    if entry is None:
        raise NotFound()
    return entry


def is_same_day(created_at: str, now: datetime) -> bool:
    return utc_date(parse_timestamp(created_at)) == utc_date(now)


def submit(db: Session, user_id: int, prompt_id: Optional[int], text: Optional[str], now: datetime) -> Entry:
    """Record a new answer to ``prompt_id`` stamped with ``now``."""
    if not text or not prompt_id:
        raise ValidationError("Text and question_id required")
    if prompt_service.get_eligible_prompt(db, user_id, prompt_id) is None:
        raise ValidationError("Unknown question_id")

    entry = Entry(
        question_id=prompt_id,
        user_id=user_id,
        text=text,
        created_at=format_timestamp(now),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("User %s created entry %s for prompt %s", user_id, entry.id, prompt_id)
    return entry


def editable_now(db: Session, entry_id: int, user_id: int, now: datetime) -> bool:
    entry = _get_owned(db, entry_id, user_id)
    return is_same_day(entry.created_at, now)


def update(db: Session, entry_id: int, user_id: int, new_text: Optional[str], now: datetime) -> None:
    """Replace an entry's text if the caller owns it and it was written today.

    The ownership and edit-window check and the write are one conditional
    UPDATE, so a stale earlier check can never let an edit through.
    """
    if not new_text:
        raise ValidationError("Text required")

    today = utc_date(now).isoformat()
    updated = (
        db.query(Entry)
        .filter(
            Entry.id == entry_id,
            Entry.user_id == user_id,
            Entry.created_at.startswith(today),
        )
        .update({Entry.text: new_text}, synchronize_session=False)
    )
    db.commit()

    if updated == 0:
        # Distinguish why nothing matched
        _get_owned(db, entry_id, user_id)
        logger.info("User %s tried to edit entry %s outside its edit window", user_id, entry_id)
        raise EditWindowClosed()
    logger.info("User %s updated entry %s", user_id, entry_id)


def page_window(page: int, limit: Optional[int] = None) -> tuple[int, int]:
    """Return ``(offset, size)`` for a 1-based page.

    Without an explicit limit the first page holds six entries and every
    later page three, continuing right after the previous page.
    """
    if page < 1:
        raise ValidationError("page must be at least 1")
    if limit is not None:
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        return (page - 1) * limit, limit
    if page == 1:
        return 0, FIRST_PAGE_SIZE
    return FIRST_PAGE_SIZE + (page - 2) * NEXT_PAGE_SIZE, NEXT_PAGE_SIZE


def _contains(column, term: str):
    return column.icontains(term, autoescape=True)


def _search_filter(search: Optional[str], search_type: Optional[str]):
    if not search:
        return None
    scope = (search_type or SEARCH_ALL).lower()
    if scope == SEARCH_KEYWORD:
        return or_(_contains(Entry.text, search), _contains(Prompt.text, search))
    if scope == SEARCH_QUESTION:
        return _contains(Prompt.text, search)
    if scope == SEARCH_DATE:
        return _contains(Entry.created_at, search)
    return or_(
        _contains(Entry.text, search),
        _contains(Prompt.text, search),
        _contains(Entry.created_at, search),
    )


def list_entries(
    db: Session,
    user_id: int,
    page: int = 1,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    search_type: Optional[str] = SEARCH_ALL,
) -> dict[str, Any]:
    """One page of the user's entries joined with their prompt text."""
    offset, size = page_window(page, limit)

    conditions = [Entry.user_id == user_id]
    search_condition = _search_filter(search, search_type)
    if search_condition is not None:
        conditions.append(search_condition)

    rows = (
        db.query(Entry, Prompt.text)
        .join(Prompt, Entry.question_id == Prompt.id)
        .filter(*conditions)
        .order_by(Entry.created_at.desc(), Entry.id.asc())
        .offset(offset)
        .limit(size)
        .all()
    )
    total = (
        db.query(func.count(Entry.id))
        .select_from(Entry)
        .join(Prompt, Entry.question_id == Prompt.id)
        .filter(*conditions)
        .scalar()
    )

    entries = [
        {
            "id": entry.id,
            "question_id": entry.question_id,
            "text": entry.text,
            "date": entry.created_at,
            "question_text": question_text,
        }
        for entry, question_text in rows
    ]
    return {
        "entries": entries,
        "total": total,
        "has_more": total > offset + len(entries),
    }
