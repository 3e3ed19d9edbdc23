"""Task model for account delivery tasks."""
from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base


class TaskStatus(str, PyEnum):
    """Task status."""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Task(Base):
    """Task model - Work items tracked against an account."""

    __tablename__ = "tasks"

    task_id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), ForeignKey('accounts.account_id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(TaskStatus), default=TaskStatus.NOT_STARTED, nullable=False)
    assignee = Column(String(255), nullable=True)
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    account = relationship("Account", back_populates="tasks")

    def __repr__(self) -> str:
        return f"<Task(task_id={self.task_id}, name='{self.name}', status='{self.status}')>"
