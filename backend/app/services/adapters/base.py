"""Base adapter interfaces for external data providers."""
from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseAdapter(ABC):
    """Base class for all adapters."""

    @abstractmethod
    def test_connection(self) -> bool:
        """Test connection to the provider."""
        pass


class WarehouseError(Exception):
    """Raised when a warehouse record cannot be fetched or understood.

    Covers transport failures, timeouts, non-2xx responses and payloads
    with an unexpected shape.
    """


class WarehouseAdapter(BaseAdapter):
    """Base adapter for the analytics warehouse that owns account data."""

    @abstractmethod
    async def fetch_external_record(self, folder_id: str, list_id: str) -> Dict[str, Any]:
        """
        Fetch the warehouse view of one account.

        Returns a sparse dict keyed by account field name. Any key may be
        missing or hold an empty or unparseable value:
        - account_name, business_unit, account_manager, team_manager
        - points_purchased, points_delivered, recurring_points_allotment
        - mrr
        - relationship_start_date, contract_start_date, contract_renewal_end
        - goals: list of {external_id, description, status, due_date, progress}

        Raises WarehouseError on any failure.
        """
        pass

    @abstractmethod
    def normalize(self, raw_data: Any) -> Dict[str, Any]:
        """Normalize a raw warehouse payload to the sparse record format."""
        pass
