"""HTTP warehouse adapter.

Talks to the warehouse gateway service, which runs the account queries
against the analytics warehouse and returns the row sets as JSON.
"""
from typing import Any, Dict, Optional
from urllib.parse import quote
import httpx
import structlog

from app.core.config import settings
from app.services.adapters.base import WarehouseAdapter, WarehouseError
from app.services.adapters.warehouse.payload import payload_to_record

logger = structlog.get_logger()


class HttpWarehouseAdapter(WarehouseAdapter):
    """Adapter for the warehouse gateway HTTP API.

    Endpoints used:
    - GET {base_url}/test
    - GET {base_url}/account/{client_folder_id}?clientListTaskId={client_list_task_id}
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.WAREHOUSE_BASE_URL).rstrip("/")
        self.api_token = api_token if api_token is not None else settings.WAREHOUSE_API_TOKEN
        self.timeout = timeout or settings.WAREHOUSE_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def test_connection(self) -> bool:
        """Test connection to the warehouse gateway."""
        try:
            with httpx.Client(headers=self._headers(), timeout=10, transport=self.transport) as client:
                response = client.get(f"{self.base_url}/test")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Warehouse connection test failed", error=str(e))
            return False

    async def fetch_external_record(self, folder_id: str, list_id: str) -> Dict[str, Any]:
        """Fetch and normalize the warehouse rows for one account."""
        url = f"{self.base_url}/account/{quote(str(folder_id), safe='')}"
        try:
            async with httpx.AsyncClient(
                headers=self._headers(), timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params={"clientListTaskId": list_id})
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            raise WarehouseError(f"Warehouse request timed out for folder {folder_id}") from e
        except httpx.HTTPStatusError as e:
            raise WarehouseError(
                f"Warehouse returned {e.response.status_code} for folder {folder_id}"
            ) from e
        except httpx.HTTPError as e:
            raise WarehouseError(f"Warehouse request failed for folder {folder_id}: {e}") from e
        except ValueError as e:
            raise WarehouseError(f"Warehouse returned a non-JSON body for folder {folder_id}") from e

        return self.normalize(payload)

    def normalize(self, raw_data: Any) -> Dict[str, Any]:
        return payload_to_record(raw_data)
