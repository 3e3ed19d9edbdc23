"""API endpoints package."""
from app.api.endpoints import accounts, goals, tasks, notes, dashboard, pipelines, warehouse

__all__ = [
    "accounts", "goals", "tasks", "notes", "dashboard", "pipelines", "warehouse"
]
