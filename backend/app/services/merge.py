"""Merge of warehouse records into stored accounts.

The warehouse owns a fixed subset of account fields. A sync overlays the
warehouse value for each of those fields when it is present and usable,
keeps the stored value otherwise, and then recomputes every derived metric
from the merged snapshot.
"""
import copy
from typing import Any, Dict, List, Mapping, Optional

from app.db.models.account import BusinessUnit
from app.services.metrics import compute_derived_fields, parse_amount, parse_count, parse_date

TEXT_FIELDS = ("account_name", "account_manager", "team_manager")
COUNT_FIELDS = ("points_purchased", "points_delivered", "recurring_points_allotment")
AMOUNT_FIELDS = ("mrr",)
DATE_FIELDS = ("relationship_start_date", "contract_start_date", "contract_renewal_end")

# Fields a sync may overwrite. Everything else on an account is edited by hand.
EXTERNAL_FIELDS = (
    "account_name",
    "business_unit",
    "account_manager",
    "team_manager",
    "points_purchased",
    "points_delivered",
    "recurring_points_allotment",
    "mrr",
    "relationship_start_date",
    "contract_start_date",
    "contract_renewal_end",
    "goals",
)


def normalize_business_unit(value: Any) -> Optional[BusinessUnit]:
    if isinstance(value, BusinessUnit):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().upper().replace(" ", "_").replace("-", "_")
    try:
        return BusinessUnit(key)
    except ValueError:
        return None


def normalize_count(value: Any) -> Optional[int]:
    """A points count, or None unless it is a non-negative whole number."""
    count = parse_count(value)
    if not isinstance(count, int) or count < 0:
        return None
    return count


def normalize_progress(value: Any) -> int:
    """Goal progress as an integer percentage clamped to 0..100."""
    if isinstance(value, str):
        value = value.replace("%", "")
    progress = parse_count(value)
    if progress is None:
        return 0
    return int(min(max(round(progress), 0), 100))


def normalize_goal(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, Mapping):
        return None
    description = raw.get("description")
    description = str(description).strip() if description is not None else ""
    if not description:
        return None
    external_id = raw.get("external_id")
    return {
        "external_id": str(external_id) if external_id not in (None, "") else None,
        "description": description,
        "status": str(raw.get("status") or ""),
        "due_date": parse_date(raw.get("due_date")),
        "progress": normalize_progress(raw.get("progress")),
    }


def normalize_goals(raw: Any) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(raw, (list, tuple)):
        return None
    goals = [goal for goal in (normalize_goal(item) for item in raw) if goal is not None]
    return goals or None


def normalize_external_value(field: str, value: Any) -> Any:
    """Normalize one warehouse value, or return None when it is unusable."""
    if value is None:
        return None
    if field in TEXT_FIELDS:
        text = str(value).strip()
        return text or None
    if field in COUNT_FIELDS:
        return normalize_count(value)
    if field in AMOUNT_FIELDS:
        return parse_amount(value)
    if field in DATE_FIELDS:
        return parse_date(value)
    if field == "business_unit":
        return normalize_business_unit(value)
    if field == "goals":
        return normalize_goals(value)
    raise KeyError(f"{field} is not a warehouse-owned field")


def merge_external_record(
    stored: Mapping[str, Any],
    external: Optional[Mapping[str, Any]],
    now: Any,
) -> Dict[str, Any]:
    """Overlay usable warehouse values on a stored account snapshot.

    ``stored`` is left untouched. The result always carries freshly
    computed derived fields.
    """
    merged = copy.deepcopy(dict(stored))
    external = external or {}

    for field in EXTERNAL_FIELDS:
        value = normalize_external_value(field, external.get(field))
        if value is not None:
            merged[field] = value

    merged.update(compute_derived_fields(merged, now))
    return merged
