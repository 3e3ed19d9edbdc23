"""Account persistence helpers.

All account writes go through this module so that the cached derived
columns are recomputed from the metrics engine every time an input field
changes.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.account import Account, BusinessUnit, EngagementType, Priority
from app.db.models.goal import Goal
from app.services.metrics import average_progress, compute_derived_fields

logger = structlog.get_logger()

STORED_FIELDS = (
    "account_name",
    "business_unit",
    "engagement_type",
    "priority",
    "account_manager",
    "team_manager",
    "relationship_start_date",
    "contract_start_date",
    "contract_renewal_end",
    "services",
    "points_purchased",
    "points_delivered",
    "recurring_points_allotment",
    "mrr",
    "growth_in_mrr",
    "industry",
    "annual_revenue",
    "employees",
    "website",
    "linkedin_profile",
    "client_folder_id",
    "client_list_task_id",
)

NULLABLE_FIELDS = ("website", "linkedin_profile", "client_folder_id", "client_list_task_id")

GOAL_FIELDS = ("external_id", "description", "status", "due_date", "progress")


def default_account_fields() -> Dict[str, Any]:
    """Field values for a freshly created, not yet synced account."""
    today = date.today()
    return {
        "account_name": "New Account",
        "business_unit": BusinessUnit.NEW_NORTH,
        "engagement_type": EngagementType.STRATEGIC,
        "priority": Priority.TIER_4,
        "account_manager": "",
        "team_manager": "",
        "relationship_start_date": today,
        "contract_start_date": today,
        "contract_renewal_end": today,
        "services": [],
        "points_purchased": 0,
        "points_delivered": 0,
        "recurring_points_allotment": 0,
        "mrr": 0,
        "growth_in_mrr": 0,
        "industry": "",
        "annual_revenue": 0,
        "employees": 0,
    }


def goal_to_fields(goal: Goal) -> Dict[str, Any]:
    return {field: getattr(goal, field) for field in GOAL_FIELDS}


def account_to_fields(account: Account) -> Dict[str, Any]:
    """Snapshot the stored fields of an account, goals included."""
    fields = {field: getattr(account, field) for field in STORED_FIELDS}
    fields["services"] = list(fields["services"] or [])
    fields["goals"] = [goal_to_fields(goal) for goal in account.goals]
    return fields


def refresh_derived_fields(account: Account, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Rewrite the cached derived columns from the current stored fields."""
    fields = {field: getattr(account, field) for field in STORED_FIELDS}
    derived = compute_derived_fields(fields, now or datetime.utcnow())
    account.points_striking_distance = derived["points_striking_distance"]
    account.delivery = derived["delivery"]
    account.potential_mrr = derived["potential_mrr"]
    return derived


def apply_fields(account: Account, fields: Dict[str, Any], now: Optional[datetime] = None) -> Account:
    """Apply stored fields (and optionally goals) to an account, then refresh its metrics."""
    for field in STORED_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(account, field, value)

    goals = fields.get("goals")
    if goals is not None:
        account.goals = [
            Goal(position=position, **{key: goal.get(key) for key in GOAL_FIELDS if key in goal})
            for position, goal in enumerate(goals)
        ]

    refresh_derived_fields(account, now)
    return account


def serialize_account(account: Account, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Stored fields plus freshly derived metrics, shaped for ``AccountResponse``."""
    fields = account_to_fields(account)
    fields.update(compute_derived_fields(fields, now or datetime.utcnow()))
    fields["goals"] = [
        dict(goal_to_fields(goal), goal_id=goal.goal_id, account_id=goal.account_id)
        for goal in account.goals
    ]
    fields["goal_progress"] = average_progress(goal.progress for goal in account.goals)
    fields.update(
        account_id=account.account_id,
        last_sync_state=account.last_sync_state,
        last_synced_at=account.last_synced_at,
        created_at=account.created_at,
        updated_at=account.updated_at,
    )
    return fields


def get_account(db: Session, account_id: str) -> Optional[Account]:
    return db.query(Account).filter(Account.account_id == account_id).first()


def list_accounts(
    db: Session,
    business_unit: Optional[BusinessUnit] = None,
    priority: Optional[Priority] = None,
    engagement_type: Optional[EngagementType] = None,
    delivery: Optional[str] = None,
    account_manager: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> Tuple[List[Account], int]:
    """List accounts matching the filters, ordered by name, with the filtered total."""
    query = db.query(Account)

    if business_unit:
        query = query.filter(Account.business_unit == business_unit)
    if priority:
        query = query.filter(Account.priority == priority)
    if engagement_type:
        query = query.filter(Account.engagement_type == engagement_type)
    if delivery:
        query = query.filter(Account.delivery == delivery)
    if account_manager:
        query = query.filter(Account.account_manager == account_manager)
    if search:
        query = query.filter(Account.account_name.ilike(f"%{search}%"))

    total = query.with_entities(func.count(Account.account_id)).scalar() or 0

    query = query.order_by(Account.account_name).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all(), total


def create_account(db: Session, fields: Dict[str, Any]) -> Account:
    values = default_account_fields()
    values.update({key: value for key, value in fields.items() if value is not None})

    account = Account()
    apply_fields(account, values)
    db.add(account)
    db.commit()
    db.refresh(account)

    logger.info("Account created", account_id=account.account_id, account_name=account.account_name)
    return account


def update_account(db: Session, account: Account, fields: Dict[str, Any]) -> Account:
    apply_fields(account, fields)
    db.commit()
    db.refresh(account)

    logger.info("Account updated", account_id=account.account_id, fields=sorted(fields))
    return account


def delete_account(db: Session, account: Account) -> None:
    account_id = account.account_id
    db.delete(account)
    db.commit()
    logger.info("Account deleted", account_id=account_id)
