"""Mock warehouse adapter for local development and demos."""
from datetime import date, timedelta
from typing import Any, Dict
import random

from app.services.adapters.base import WarehouseAdapter
from app.services.adapters.warehouse.payload import payload_to_record


class MockWarehouseAdapter(WarehouseAdapter):
    """Mock adapter that serves synthetic warehouse rows.

    Rows are seeded from the folder id, so the same account always gets
    the same numbers.
    """

    SAMPLE_MANAGERS = ["John Smith", "Emily Brown", "Priya Patel", "Marcus Lee"]
    SAMPLE_TEAM_LEADS = ["Sarah Johnson", "Michael Wilson", "Ana Gomez"]
    SAMPLE_UNITS = ["NEW_NORTH", "IDEOMETRY", "MOTION", "SPOKE"]
    SAMPLE_GOALS = [
        "Increase website traffic by 50%",
        "Launch ABM pilot for top 20 targets",
        "Double organic demo requests",
        "Publish quarterly content calendar",
    ]

    def test_connection(self) -> bool:
        """Mock always returns successful connection."""
        return True

    def build_payload(self, folder_id: str, list_id: str) -> Dict[str, Any]:
        """Generate the raw gateway payload for an account."""
        rng = random.Random(f"{folder_id}:{list_id}")
        start = date.today() - timedelta(days=rng.randint(60, 1500))
        recurring = rng.choice([50, 75, 100, 150, 200])
        purchased = recurring * rng.randint(6, 24)
        delivered = rng.randint(0, purchased)

        goals = []
        for index in range(rng.randint(1, 3)):
            goals.append({
                "id": f"{folder_id}-goal-{index + 1}",
                "task_name": rng.choice(self.SAMPLE_GOALS),
                "status": rng.choice(["NOT_STARTED", "IN_PROGRESS", "COMPLETED"]),
                "progress": f"{rng.randint(0, 100)}%",
                "due_date": (date.today() + timedelta(days=rng.randint(14, 240))).isoformat(),
            })

        return {
            "clientData": [{
                "id": list_id,
                "client_name": f"Client {folder_id}",
                "assignee": rng.choice(self.SAMPLE_MANAGERS),
                "team_lead": rng.choice(self.SAMPLE_TEAM_LEADS),
                "business_unit": rng.choice(self.SAMPLE_UNITS),
                "mrr": f"{rng.randint(20, 300) * 100:,}",
                "recurring_points_allotment": str(recurring),
                "original_contract_start_date": start.isoformat(),
                "points_mrr_start_date": (start + timedelta(days=14)).isoformat(),
                "contract_renewal_end": (start + timedelta(days=365 * rng.randint(1, 4))).isoformat(),
            }],
            "points": [{
                "client_folder_id": folder_id,
                "points_purchased": f"{purchased:,}",
                "points_delivered": f"{delivered:,}",
            }],
            "goals": goals,
        }

    async def fetch_external_record(self, folder_id: str, list_id: str) -> Dict[str, Any]:
        return self.normalize(self.build_payload(folder_id, list_id))

    def normalize(self, raw_data: Any) -> Dict[str, Any]:
        return payload_to_record(raw_data)
