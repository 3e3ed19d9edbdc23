"""Goal model for account goals."""
from sqlalchemy import Column, Integer, String, Date, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base


class Goal(Base):
    """Goal model - Ordered goals attached to an account.

    Goals are part of the warehouse-owned field set: a successful sync
    replaces the whole list.
    """

    __tablename__ = "goals"

    goal_id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), ForeignKey('accounts.account_id', ondelete='CASCADE'), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    external_id = Column(String(100), nullable=True)
    description = Column(Text, nullable=False)
    status = Column(String(50), default="", nullable=False)
    due_date = Column(Date, nullable=True)
    progress = Column(Integer, default=0, nullable=False)  # 0-100

    account = relationship("Account", back_populates="goals")

    def __repr__(self) -> str:
        return f"<Goal(goal_id={self.goal_id}, account_id={self.account_id}, progress={self.progress})>"
