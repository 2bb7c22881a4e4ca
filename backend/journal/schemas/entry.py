"""Pydantic schemas for journal entries."""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class SubmitRequest(BaseModel):
    question_id: Optional[int] = None
    text: Optional[str] = None
    answer_id: Optional[int] = None  # present → edit an existing entry


class EntryOut(BaseModel):
    id: int
    question_id: int
    text: str
    date: str  # the entry's created_at timestamp
    question_text: str


class EntryPage(BaseModel):
    entries: list[EntryOut] = []
    total: int
    has_more: bool = Field(alias="hasMore")

    model_config = {"populate_by_name": True}


class CanEditOut(BaseModel):
    can_edit: bool = Field(alias="canEdit")

    model_config = {"populate_by_name": True}
