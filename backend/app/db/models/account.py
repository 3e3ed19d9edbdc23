"""Account model for client accounts and their cached delivery metrics."""
from datetime import date
from enum import Enum as PyEnum
from uuid import uuid4
from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Float, Enum, JSON, Index
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.services.metrics import DeliveryStatus


class BusinessUnit(str, PyEnum):
    """Agency business unit owning the account."""
    NEW_NORTH = "NEW_NORTH"
    IDEOMETRY = "IDEOMETRY"
    MOTION = "MOTION"
    SPOKE = "SPOKE"


class EngagementType(str, PyEnum):
    """Engagement type."""
    STRATEGIC = "STRATEGIC"
    TACTICAL = "TACTICAL"


class Priority(str, PyEnum):
    """Account priority tier."""
    TIER_1 = "TIER_1"
    TIER_2 = "TIER_2"
    TIER_3 = "TIER_3"
    TIER_4 = "TIER_4"


class Service(str, PyEnum):
    """Services sold to an account."""
    ABM = "ABM"
    PAID_MEDIA = "PAID_MEDIA"
    SEO = "SEO"
    CONTENT = "CONTENT"
    REPORTING = "REPORTING"
    SOCIAL = "SOCIAL"
    WEBSITE = "WEBSITE"


class SyncState(str, PyEnum):
    """Outcome of the latest warehouse sync attempt for an account.

    IN_FLIGHT only appears in sync logs while a fetch is pending. The stored
    last_sync_state is always NOT_ATTEMPTED or a terminal state.
    """
    NOT_ATTEMPTED = "NOT_ATTEMPTED"
    IN_FLIGHT = "IN_FLIGHT"
    MERGED = "MERGED"
    SKIPPED_NO_IDS = "SKIPPED_NO_IDS"
    FAILED_PRESERVED = "FAILED_PRESERVED"


def _new_account_id() -> str:
    return uuid4().hex


class Account(Base):
    """Account model - A client account with points and revenue tracking.

    ``points_striking_distance``, ``delivery`` and ``potential_mrr`` are a
    cache of the metrics engine output. They are rewritten by the account
    store on every write and are never set from user input.
    """

    __tablename__ = "accounts"

    account_id = Column(String(36), primary_key=True, default=_new_account_id)
    account_name = Column(String(255), nullable=False, index=True)

    business_unit = Column(Enum(BusinessUnit), default=BusinessUnit.NEW_NORTH, nullable=False)
    engagement_type = Column(Enum(EngagementType), default=EngagementType.STRATEGIC, nullable=False)
    priority = Column(Enum(Priority), default=Priority.TIER_4, nullable=False)
    account_manager = Column(String(255), default="", nullable=False)
    team_manager = Column(String(255), default="", nullable=False)

    relationship_start_date = Column(Date, default=date.today, nullable=False)
    contract_start_date = Column(Date, default=date.today, nullable=False)
    contract_renewal_end = Column(Date, default=date.today, nullable=False)

    services = Column(JSON, default=list, nullable=False)

    # Points
    points_purchased = Column(Integer, default=0, nullable=False)
    points_delivered = Column(Integer, default=0, nullable=False)
    recurring_points_allotment = Column(Integer, default=0, nullable=False)

    # Revenue
    mrr = Column(Numeric(12, 2), default=0, nullable=False)
    growth_in_mrr = Column(Numeric(12, 2), default=0, nullable=False)

    # Cached derived metrics
    points_striking_distance = Column(Float, nullable=True)
    delivery = Column(Enum(DeliveryStatus), nullable=True)
    potential_mrr = Column(Numeric(12, 2), nullable=True)

    # Company profile
    industry = Column(String(100), default="", nullable=False)
    annual_revenue = Column(Numeric(16, 2), default=0, nullable=False)
    employees = Column(Integer, default=0, nullable=False)
    website = Column(String(500), nullable=True)
    linkedin_profile = Column(String(500), nullable=True)

    # Warehouse identifiers, both required for sync
    client_folder_id = Column(String(100), nullable=True)
    client_list_task_id = Column(String(100), nullable=True)
    last_sync_state = Column(Enum(SyncState), default=SyncState.NOT_ATTEMPTED, nullable=False)
    last_synced_at = Column(DateTime, nullable=True)

    goals = relationship(
        "Goal", back_populates="account", cascade="all, delete-orphan", order_by="Goal.position"
    )
    tasks = relationship(
        "Task", back_populates="account", cascade="all, delete-orphan", order_by="Task.task_id"
    )
    notes = relationship(
        "Note", back_populates="account", cascade="all, delete-orphan", order_by="Note.note_id"
    )

    __table_args__ = (
        Index('idx_account_business_unit', 'business_unit'),
        Index('idx_account_delivery', 'delivery'),
    )

    def __repr__(self) -> str:
        return f"<Account(account_id={self.account_id}, name='{self.account_name}', delivery='{self.delivery}')>"
