"""Dashboard and KPI endpoints."""
from collections import Counter
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.models.account import BusinessUnit, EngagementType, Priority
from app.schemas.dashboard import DashboardSummary
from app.services import accounts as account_store
from app.services.metrics import DeliveryStatus, parse_amount, percentage_of, rounded_mean

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    business_unit: Optional[BusinessUnit] = None,
    priority: Optional[Priority] = None,
    engagement_type: Optional[EngagementType] = None,
    delivery: Optional[DeliveryStatus] = None,
    account_manager: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Portfolio KPIs for the accounts matching the list filters."""
    accounts, total = account_store.list_accounts(
        db,
        business_unit=business_unit,
        priority=priority,
        engagement_type=engagement_type,
        delivery=delivery,
        account_manager=account_manager,
        search=search,
    )

    now = datetime.utcnow()
    rows = [account_store.serialize_account(account, now) for account in accounts]

    off_track = sum(1 for row in rows if row["delivery"] == DeliveryStatus.OFF_TRACK)
    tier_1 = sum(1 for row in rows if row["priority"] == Priority.TIER_1)
    total_mrr = sum(parse_amount(row["mrr"]) or 0 for row in rows)
    total_potential_mrr = sum(row["potential_mrr"] or 0 for row in rows)

    # Goal progress is averaged over every goal, not per account
    goal_progress = [goal["progress"] for row in rows for goal in row["goals"]]

    by_business_unit = Counter(row["business_unit"].value for row in rows if row["business_unit"])
    by_delivery = Counter(row["delivery"].value for row in rows if row["delivery"])

    return DashboardSummary(
        total_accounts=total,
        off_track_accounts=off_track,
        off_track_percent=percentage_of(off_track, total),
        tier_1_accounts=tier_1,
        tier_1_percent=percentage_of(tier_1, total),
        total_mrr=total_mrr,
        average_mrr=rounded_mean(row["mrr"] for row in rows),
        total_potential_mrr=total_potential_mrr,
        average_striking_distance=rounded_mean(row["points_striking_distance"] for row in rows),
        average_goal_progress=rounded_mean(goal_progress),
        by_business_unit=dict(by_business_unit),
        by_delivery=dict(by_delivery),
    )
