"""API router configuration."""
from fastapi import APIRouter
from app.api.endpoints import (
    accounts, goals, tasks, notes, dashboard, pipelines, warehouse
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(accounts.router)
api_router.include_router(goals.router)
api_router.include_router(tasks.router)
api_router.include_router(notes.router)
api_router.include_router(dashboard.router)
api_router.include_router(pipelines.router)
api_router.include_router(warehouse.router)
