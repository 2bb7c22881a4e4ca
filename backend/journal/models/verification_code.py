"""Two-factor verification code ORM model."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from journal.database import Base


class VerificationCode(Base):
    __tablename__ = "two_factor_verification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<VerificationCode(user_id={self.user_id}, expires_at={self.expires_at})>"
