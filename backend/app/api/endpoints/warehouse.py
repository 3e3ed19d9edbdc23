"""Warehouse connectivity endpoints."""
from fastapi import APIRouter, Depends

from app.api.deps import get_warehouse
from app.core.config import settings
from app.services.adapters.base import WarehouseAdapter

router = APIRouter(prefix="/warehouse", tags=["Warehouse"])


@router.get("/status")
def warehouse_status(warehouse: WarehouseAdapter = Depends(get_warehouse)):
    """Test the connection to the configured warehouse."""
    return {
        "provider": settings.WAREHOUSE_PROVIDER,
        "adapter": type(warehouse).__name__,
        "connected": warehouse.test_connection(),
    }
