"""Warehouse adapter dependency."""
from app.services.adapters.base import WarehouseAdapter
from app.services.adapters.warehouse import get_warehouse_adapter


def get_warehouse() -> WarehouseAdapter:
    """Get the configured warehouse adapter."""
    return get_warehouse_adapter()
