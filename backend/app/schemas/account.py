"""Account schemas."""
from datetime import date, datetime
from typing import List, Optional, Union
from pydantic import Field, field_validator

from app.db.models.account import BusinessUnit, EngagementType, Priority, Service, SyncState
from app.schemas.common import CamelModel
from app.services.metrics import DeliveryStatus, parse_amount, parse_count, parse_date

COUNT_FIELDS = ("points_purchased", "points_delivered", "recurring_points_allotment", "employees")
AMOUNT_FIELDS = ("mrr", "growth_in_mrr", "annual_revenue")
DATE_FIELDS = ("relationship_start_date", "contract_start_date", "contract_renewal_end")


def _count(value):
    if value is None or isinstance(value, (int, float)):
        return value
    parsed = parse_count(value)
    if parsed is None:
        raise ValueError("must be a number")
    return parsed


def _amount(value):
    if value is None or isinstance(value, (int, float)):
        return value
    parsed = parse_amount(value)
    if parsed is None:
        raise ValueError("must be a monetary amount")
    return parsed


def _date(value):
    if value is None or isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError("must be a date")
    return parsed


def _dedupe(services):
    if services is None:
        return services
    return list(dict.fromkeys(services))


class GoalIn(CamelModel):
    """Goal payload."""
    description: str = Field(..., min_length=1)
    status: str = ""
    due_date: Optional[date] = None
    progress: int = Field(0, ge=0, le=100)
    external_id: Optional[str] = None

    @field_validator("progress", mode="before")
    @classmethod
    def strip_percent(cls, value):
        if isinstance(value, str):
            return _count(value.replace("%", ""))
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value):
        return _date(value)


class GoalUpdate(CamelModel):
    """Partial goal payload."""
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = None
    due_date: Optional[date] = None
    progress: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("progress", mode="before")
    @classmethod
    def strip_percent(cls, value):
        if isinstance(value, str):
            return _count(value.replace("%", ""))
        return value


class GoalResponse(GoalIn):
    """Goal response."""
    goal_id: int
    account_id: str


class AccountFields(CamelModel):
    """Validators shared by account create and update payloads."""

    @field_validator(*COUNT_FIELDS, mode="before", check_fields=False)
    @classmethod
    def normalize_count(cls, value):
        return _count(value)

    @field_validator(*AMOUNT_FIELDS, mode="before", check_fields=False)
    @classmethod
    def normalize_amount(cls, value):
        return _amount(value)

    @field_validator(*DATE_FIELDS, mode="before", check_fields=False)
    @classmethod
    def normalize_date(cls, value):
        return _date(value)

    @field_validator("services", mode="after", check_fields=False)
    @classmethod
    def dedupe_services(cls, value):
        return _dedupe(value)


class AccountCreate(AccountFields):
    """Schema for creating an account. Omitted fields take the account defaults."""
    account_name: str = Field("New Account", min_length=1)
    business_unit: Optional[BusinessUnit] = None
    engagement_type: Optional[EngagementType] = None
    priority: Optional[Priority] = None
    account_manager: Optional[str] = None
    team_manager: Optional[str] = None
    relationship_start_date: Optional[date] = None
    contract_start_date: Optional[date] = None
    contract_renewal_end: Optional[date] = None
    services: Optional[List[Service]] = None
    points_purchased: Optional[int] = Field(None, ge=0)
    points_delivered: Optional[int] = Field(None, ge=0)
    recurring_points_allotment: Optional[int] = Field(None, ge=0)
    mrr: Optional[float] = None
    growth_in_mrr: Optional[float] = None
    industry: Optional[str] = None
    annual_revenue: Optional[float] = None
    employees: Optional[int] = Field(None, ge=0)
    website: Optional[str] = None
    linkedin_profile: Optional[str] = None
    client_folder_id: Optional[str] = None
    client_list_task_id: Optional[str] = None
    goals: Optional[List[GoalIn]] = None


class AccountUpdate(AccountCreate):
    """Schema for updating an account. Only fields sent are applied."""
    account_name: Optional[str] = Field(None, min_length=1)


class AccountResponse(CamelModel):
    """Account with its derived metrics."""
    account_id: str
    account_name: str
    business_unit: BusinessUnit
    engagement_type: EngagementType
    priority: Priority
    account_manager: str
    team_manager: str
    relationship_start_date: date
    contract_start_date: date
    contract_renewal_end: date
    services: List[Service]
    points_purchased: Union[int, float]
    points_delivered: Union[int, float]
    recurring_points_allotment: Union[int, float]
    mrr: float
    growth_in_mrr: float
    industry: str
    annual_revenue: float
    employees: int
    website: Optional[str] = None
    linkedin_profile: Optional[str] = None
    client_folder_id: Optional[str] = None
    client_list_task_id: Optional[str] = None

    # Derived
    points_balance: Optional[Union[int, float]] = None
    points_striking_distance: Optional[Union[int, float]] = None
    delivery: Optional[DeliveryStatus] = None
    potential_mrr: Optional[float] = None
    client_tenure: Optional[int] = None
    goal_progress: int = 0

    goals: List[GoalResponse] = []
    last_sync_state: SyncState
    last_synced_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AccountListResponse(CamelModel):
    """Paginated account list."""
    items: List[AccountResponse]
    total: int


class AccountSyncRequest(CamelModel):
    """Batch sync request; all accounts are synced when no ids are given."""
    account_ids: Optional[List[str]] = None
