"""Warehouse adapters package."""
from typing import Optional

from app.core.config import settings
from app.services.adapters.base import WarehouseAdapter, WarehouseError
from app.services.adapters.warehouse.gateway import HttpWarehouseAdapter
from app.services.adapters.warehouse.mock import MockWarehouseAdapter


def get_warehouse_adapter(provider: Optional[str] = None) -> WarehouseAdapter:
    """Get the configured warehouse adapter."""
    provider = provider or settings.WAREHOUSE_PROVIDER

    if provider == "http":
        return HttpWarehouseAdapter()
    return MockWarehouseAdapter()


__all__ = [
    "WarehouseAdapter",
    "WarehouseError",
    "HttpWarehouseAdapter",
    "MockWarehouseAdapter",
    "get_warehouse_adapter",
]
