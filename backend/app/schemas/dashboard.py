"""Dashboard schemas."""
from typing import Dict

from app.schemas.common import CamelModel


class DashboardSummary(CamelModel):
    """Portfolio-level figures for the accounts matching the current filters."""
    total_accounts: int
    off_track_accounts: int
    off_track_percent: int
    tier_1_accounts: int
    tier_1_percent: int
    total_mrr: float
    average_mrr: int
    total_potential_mrr: float
    average_striking_distance: int
    average_goal_progress: int
    by_business_unit: Dict[str, int]
    by_delivery: Dict[str, int]
