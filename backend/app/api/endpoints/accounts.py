"""Account management endpoints."""
from dataclasses import asdict
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, status, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_warehouse
from app.db.models.account import Account, BusinessUnit, EngagementType, Priority
from app.schemas.account import (
    AccountCreate, AccountUpdate, AccountResponse, AccountListResponse, AccountSyncRequest,
)
from app.schemas.sync import AccountSyncResponse, SyncOutcomeResponse, SyncRunResponse
from app.services import accounts as account_store
from app.services.adapters.base import WarehouseAdapter
from app.services.metrics import DeliveryStatus
from app.services.pipelines.account_sync import SyncOutcome, run_account_sync_pipeline, sync_account

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def get_account_or_404(db: Session, account_id: str) -> Account:
    account = account_store.get_account(db, account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found"
        )
    return account


def to_response(account: Account, now: Optional[datetime] = None) -> AccountResponse:
    return AccountResponse.model_validate(account_store.serialize_account(account, now))


def outcome_to_response(outcome: SyncOutcome) -> SyncOutcomeResponse:
    return SyncOutcomeResponse(**asdict(outcome), stale=outcome.stale)


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    business_unit: Optional[BusinessUnit] = None,
    priority: Optional[Priority] = None,
    engagement_type: Optional[EngagementType] = None,
    delivery: Optional[DeliveryStatus] = None,
    account_manager: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List accounts with filtering. Derived metrics are computed per request."""
    accounts, total = account_store.list_accounts(
        db,
        business_unit=business_unit,
        priority=priority,
        engagement_type=engagement_type,
        delivery=delivery,
        account_manager=account_manager,
        search=search,
        skip=skip,
        limit=limit,
    )

    now = datetime.utcnow()
    return {
        "items": [to_response(account, now) for account in accounts],
        "total": total
    }


@router.post("/sync", response_model=SyncRunResponse)
async def sync_all_accounts(
    sync_in: Optional[AccountSyncRequest] = Body(None),
    db: Session = Depends(get_db),
    warehouse: WarehouseAdapter = Depends(get_warehouse)
):
    """Sync accounts with the warehouse and report every account's outcome.

    Responds 502 only when every attempted account failed.
    """
    result = await run_account_sync_pipeline(
        db,
        warehouse,
        account_ids=sync_in.account_ids if sync_in else None,
        triggered_by="api",
    )

    response = SyncRunResponse(
        run_id=result["run_id"],
        counters=result["counters"],
        outcomes=[outcome_to_response(outcome) for outcome in result["outcomes"]],
        all_failed=result["all_failed"],
    )
    if result["all_failed"]:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=response.model_dump(mode="json", by_alias=True)
        )
    return response


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    db: Session = Depends(get_db)
):
    """Get account by ID."""
    return to_response(get_account_or_404(db, account_id))


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_in: AccountCreate,
    db: Session = Depends(get_db)
):
    """Create a new account. Omitted fields get the account defaults."""
    account = account_store.create_account(db, account_in.model_dump(exclude_unset=True))
    return to_response(account)


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    account_in: AccountUpdate,
    db: Session = Depends(get_db)
):
    """Update account."""
    account = get_account_or_404(db, account_id)
    account = account_store.update_account(db, account, account_in.model_dump(exclude_unset=True))
    return to_response(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    db: Session = Depends(get_db)
):
    """Delete account."""
    account = get_account_or_404(db, account_id)
    account_store.delete_account(db, account)


@router.post("/{account_id}/sync", response_model=AccountSyncResponse)
async def sync_single_account(
    account_id: str,
    db: Session = Depends(get_db),
    warehouse: WarehouseAdapter = Depends(get_warehouse)
):
    """Sync one account. A failed sync returns the stored, possibly stale, account."""
    account = get_account_or_404(db, account_id)
    outcome = await sync_account(db, account, warehouse)

    return AccountSyncResponse(
        outcome=outcome_to_response(outcome),
        account=to_response(account),
    )
