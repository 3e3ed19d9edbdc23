"""Warehouse sync schemas."""
from typing import Dict, List, Optional

from app.db.models.account import SyncState
from app.schemas.account import AccountResponse
from app.schemas.common import CamelModel


class SyncOutcomeResponse(CamelModel):
    """Result of one account's sync attempt."""
    account_id: str
    account_name: Optional[str] = None
    state: SyncState
    error: Optional[str] = None
    stale: bool


class SyncRunResponse(CamelModel):
    """Result of a batch sync."""
    run_id: Optional[int] = None
    counters: Dict[str, int]
    outcomes: List[SyncOutcomeResponse]
    all_failed: bool


class AccountSyncResponse(CamelModel):
    """Result of a single-account sync."""
    outcome: SyncOutcomeResponse
    account: AccountResponse
