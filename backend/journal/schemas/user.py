"""Pydantic schemas for Users."""
from pydantic import BaseModel

from journal.models.user import Role


class UserOut(BaseModel):
    id: int
    email: str
    role: Role

    model_config = {"from_attributes": True}
