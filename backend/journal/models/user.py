"""User ORM model."""
import enum

from sqlalchemy import Boolean, Column, Enum as SAEnum, Integer, String
from sqlalchemy.orm import relationship

from journal.database import Base


class Role(str, enum.Enum):
    user = "user"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)  # exact, case-sensitive match
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(Role, name="user_role", create_constraint=True), nullable=False, default=Role.user)
    two_factor_enabled = Column(Boolean, nullable=False, default=False)
    two_factor_secret = Column(String(255), nullable=True)

    prompts = relationship("Prompt", back_populates="owner")
    entries = relationship("Entry", back_populates="owner")
