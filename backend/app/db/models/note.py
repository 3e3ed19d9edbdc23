"""Note model for free-form account notes."""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base


class Note(Base):
    """Note model - Free-form notes left on an account."""

    __tablename__ = "notes"

    note_id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), ForeignKey('accounts.account_id', ondelete='CASCADE'), nullable=False, index=True)
    description = Column(Text, nullable=False)
    created_by = Column(String(255), nullable=True)

    account = relationship("Account", back_populates="notes")

    def __repr__(self) -> str:
        return f"<Note(note_id={self.note_id}, account_id={self.account_id})>"
