"""Journal entry ORM model. Stored in the ``answers`` table."""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from journal.database import Base


class Entry(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)  # opaque rich-text blob
    # Fixed-width UTC ISO-8601 string; also the ordering and edit-window key
    created_at = Column(String(32), nullable=False, index=True)

    prompt = relationship("Prompt")
    owner = relationship("User", back_populates="entries")
