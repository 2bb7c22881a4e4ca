"""Pydantic schemas for prompts."""
from pydantic import BaseModel


class PromptOut(BaseModel):
    id: int
    text: str

    model_config = {"from_attributes": True}
