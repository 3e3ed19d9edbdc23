"""Database models package."""
from app.db.models.account import (
    Account, BusinessUnit, EngagementType, Priority, Service, SyncState
)
from app.db.models.goal import Goal
from app.db.models.task import Task, TaskStatus
from app.db.models.note import Note
from app.db.models.job_run import JobRun, JobStatus

__all__ = [
    "Account",
    "BusinessUnit",
    "EngagementType",
    "Priority",
    "Service",
    "SyncState",
    "Goal",
    "Task",
    "TaskStatus",
    "Note",
    "JobRun",
    "JobStatus",
]
