"""Pipeline services package."""
from app.services.pipelines.account_sync import (
    SyncOutcome,
    run_account_sync_pipeline,
    sync_account,
    sync_accounts,
)

__all__ = [
    "SyncOutcome",
    "run_account_sync_pipeline",
    "sync_account",
    "sync_accounts",
]
