"""Mapping of warehouse payloads to sparse account records.

The warehouse gateway answers with three row sets for an account::

    {
        "clientData": [{"client_name", "assignee", "team_lead", "mrr", ...}],
        "points": [{"points_purchased", "points_delivered"}],
        "goals": [{"id", "task_name", "status", "progress", "due_date", ...}]
    }

Only the first row of ``clientData`` and ``points`` is used.
"""
from typing import Any, Dict, List, Mapping, Optional

from app.services.adapters.base import WarehouseError

CLIENT_COLUMNS = {
    "client_name": "account_name",
    "business_unit": "business_unit",
    "assignee": "account_manager",
    "team_lead": "team_manager",
    "mrr": "mrr",
    "recurring_points_allotment": "recurring_points_allotment",
    "original_contract_start_date": "relationship_start_date",
    "points_mrr_start_date": "contract_start_date",
    "contract_renewal_end": "contract_renewal_end",
}

POINTS_COLUMNS = {
    "points_purchased": "points_purchased",
    "points_delivered": "points_delivered",
}


def _rows(payload: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    rows = payload.get(key)
    if rows is None:
        return []
    if not isinstance(rows, list) or not all(isinstance(row, Mapping) for row in rows):
        raise WarehouseError(f"Malformed warehouse payload: '{key}' must be a list of rows")
    return rows


def _first(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    rows = _rows(payload, key)
    return rows[0] if rows else {}


def _goal(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "external_id": row.get("id"),
        "description": row.get("task_name") or row.get("task_description"),
        "status": row.get("status"),
        "due_date": row.get("due_date"),
        "progress": row.get("progress"),
    }


def payload_to_record(payload: Any) -> Dict[str, Any]:
    """Translate a warehouse payload into a sparse account record."""
    if not isinstance(payload, Mapping):
        raise WarehouseError("Malformed warehouse payload: expected a JSON object")

    record: Dict[str, Optional[Any]] = {}
    client_row = _first(payload, "clientData")
    for column, field in CLIENT_COLUMNS.items():
        record[field] = client_row.get(column)

    points_row = _first(payload, "points")
    for column, field in POINTS_COLUMNS.items():
        record[field] = points_row.get(column)

    if payload.get("goals") is not None:
        record["goals"] = [_goal(row) for row in _rows(payload, "goals")]

    return {field: value for field, value in record.items() if value is not None}
