"""API dependencies package."""
from app.api.deps.database import get_db
from app.api.deps.warehouse import get_warehouse

__all__ = ["get_db", "get_warehouse"]
