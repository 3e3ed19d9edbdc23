"""Pydantic schemas package."""
from app.schemas.account import (
    AccountCreate, AccountUpdate, AccountResponse, AccountListResponse, AccountSyncRequest,
    GoalIn, GoalUpdate, GoalResponse,
)
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.schemas.note import NoteCreate, NoteResponse
from app.schemas.sync import SyncOutcomeResponse, SyncRunResponse, AccountSyncResponse
from app.schemas.dashboard import DashboardSummary

__all__ = [
    "AccountCreate", "AccountUpdate", "AccountResponse", "AccountListResponse", "AccountSyncRequest",
    "GoalIn", "GoalUpdate", "GoalResponse",
    "TaskCreate", "TaskUpdate", "TaskResponse",
    "NoteCreate", "NoteResponse",
    "SyncOutcomeResponse", "SyncRunResponse", "AccountSyncResponse",
    "DashboardSummary",
]
