"""Account sync pipeline service.

Pulls the warehouse-owned fields for each account, merges them over the
stored values and persists the result with refreshed metrics. A failure
for one account leaves that account untouched and never stops the others.
"""
import asyncio
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.models.account import Account, SyncState
from app.db.models.job_run import JobRun, JobStatus
from app.services.accounts import account_to_fields, apply_fields
from app.services.adapters.base import WarehouseAdapter
from app.services.merge import EXTERNAL_FIELDS, merge_external_record

logger = structlog.get_logger()

PIPELINE_NAME = "account_sync"


@dataclass
class SyncOutcome:
    """Terminal state of one account's sync attempt."""
    account_id: str
    account_name: Optional[str]
    state: SyncState
    error: Optional[str] = None

    @property
    def stale(self) -> bool:
        """True when the stored data was not refreshed by this attempt."""
        return self.state != SyncState.MERGED


def _record_state(db: Session, account: Account, state: SyncState) -> None:
    account.last_sync_state = state
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Could not record sync state", account_id=account.account_id, state=state.value, error=str(e))


async def sync_account(
    db: Session,
    account: Account,
    adapter: WarehouseAdapter,
    now: Optional[datetime] = None,
) -> SyncOutcome:
    """
    Sync one account against the warehouse.

    NOT_ATTEMPTED -> SKIPPED_NO_IDS when either warehouse id is missing.
    NOT_ATTEMPTED -> IN_FLIGHT -> MERGED on fetch + merge + persist.
    IN_FLIGHT -> FAILED_PRESERVED on any error, with the stored row unchanged.
    """
    now = now or datetime.utcnow()
    account_id = account.account_id
    account_name = account.account_name
    folder_id = account.client_folder_id
    list_id = account.client_list_task_id

    if not folder_id or not list_id:
        logger.info("Skipping account sync, missing warehouse ids", account_id=account_id,
                    state=SyncState.SKIPPED_NO_IDS.value)
        _record_state(db, account, SyncState.SKIPPED_NO_IDS)
        return SyncOutcome(account_id, account_name, SyncState.SKIPPED_NO_IDS)

    stored = account_to_fields(account)
    logger.info("Syncing account", account_id=account_id, state=SyncState.IN_FLIGHT.value)

    try:
        external = await adapter.fetch_external_record(folder_id, list_id)
        merged = merge_external_record(stored, external, now)

        # Only warehouse-owned fields that actually changed are written
        changes = {
            field: merged[field]
            for field in EXTERNAL_FIELDS
            if merged.get(field) != stored.get(field)
        }
        apply_fields(account, changes, now)
        account.last_sync_state = SyncState.MERGED
        account.last_synced_at = now
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning("Account sync failed, keeping stored data", account_id=account_id,
                       state=SyncState.FAILED_PRESERVED.value, error=str(e))
        _record_state(db, account, SyncState.FAILED_PRESERVED)
        return SyncOutcome(account_id, account_name, SyncState.FAILED_PRESERVED, error=str(e))

    logger.info("Account synced", account_id=account_id, state=SyncState.MERGED.value,
                changed=sorted(changes))
    return SyncOutcome(account_id, merged["account_name"], SyncState.MERGED)


async def sync_accounts(
    db: Session,
    accounts: Iterable[Account],
    adapter: WarehouseAdapter,
    now: Optional[datetime] = None,
) -> List[SyncOutcome]:
    """Sync accounts concurrently and collect every outcome.

    Outcomes are returned in input order; completion order is not.
    """
    now = now or datetime.utcnow()
    accounts = list(accounts)
    labels = [(account.account_id, account.account_name) for account in accounts]

    results = await asyncio.gather(
        *(sync_account(db, account, adapter, now) for account in accounts),
        return_exceptions=True,
    )

    outcomes = []
    for (account_id, account_name), result in zip(labels, results):
        if isinstance(result, BaseException):
            db.rollback()
            logger.error("Account sync crashed", account_id=account_id, error=str(result))
            result = SyncOutcome(account_id, account_name, SyncState.FAILED_PRESERVED, error=str(result))
        outcomes.append(result)
    return outcomes


def summarize_outcomes(outcomes: List[SyncOutcome]) -> Dict[str, int]:
    counters = {"total": len(outcomes), "merged": 0, "skipped": 0, "failed": 0}
    for outcome in outcomes:
        if outcome.state == SyncState.MERGED:
            counters["merged"] += 1
        elif outcome.state == SyncState.SKIPPED_NO_IDS:
            counters["skipped"] += 1
        else:
            counters["failed"] += 1
    return counters


async def run_account_sync_pipeline(
    db: Session,
    adapter: WarehouseAdapter,
    account_ids: Optional[List[str]] = None,
    triggered_by: str = "system",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Run the account sync pipeline.

    Steps:
    1. Record a job run
    2. Load the requested accounts (all accounts when no ids are given)
    3. Sync every account concurrently, isolating failures
    4. Store the counters on the job run

    The run is marked failed only when every attempted account failed.
    """
    job_run = JobRun(
        pipeline_name=PIPELINE_NAME,
        status=JobStatus.RUNNING,
        triggered_by=triggered_by
    )
    db.add(job_run)
    db.commit()
    run_id = job_run.run_id

    try:
        logger.info("Starting account sync pipeline", run_id=run_id)

        query = db.query(Account)
        if account_ids is not None:
            query = query.filter(Account.account_id.in_(account_ids))
        accounts = query.order_by(Account.account_name).all()

        outcomes = await sync_accounts(db, accounts, adapter, now)
        counters = summarize_outcomes(outcomes)
        attempted = counters["merged"] + counters["failed"]
        all_failed = attempted > 0 and counters["merged"] == 0

        job_run.status = JobStatus.FAILED if all_failed else JobStatus.COMPLETED
        job_run.error_message = "Every attempted account sync failed" if all_failed else None
        job_run.ended_at = datetime.utcnow()
        job_run.counters_json = json.dumps(counters)
        db.commit()

        logger.info("Account sync completed", run_id=run_id, counters=counters)
        return {
            "run_id": run_id,
            "counters": counters,
            "outcomes": outcomes,
            "all_failed": all_failed,
        }

    except Exception as e:
        logger.error("Account sync pipeline failed", run_id=run_id, error=str(e))
        db.rollback()
        job_run.status = JobStatus.FAILED
        job_run.error_message = str(e)
        job_run.ended_at = datetime.utcnow()
        db.commit()
        raise
