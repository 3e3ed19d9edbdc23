"""Job runs model for pipeline execution history."""
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, DateTime, Enum, Text, Index
from app.db.base import Base


class JobStatus(str, PyEnum):
    """Job run status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class JobRun(Base):
    """Job runs model - One row per batch warehouse sync."""

    __tablename__ = "job_runs"

    run_id = Column(Integer, primary_key=True, autoincrement=True)
    pipeline_name = Column(String(100), nullable=False)  # account_sync
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ended_at = Column(DateTime, nullable=True)
    status = Column(Enum(JobStatus), default=JobStatus.PENDING, nullable=False)
    counters_json = Column(Text, nullable=True)  # JSON with total/merged/skipped/failed counts
    error_message = Column(Text, nullable=True)
    triggered_by = Column(String(100), nullable=True)  # "api", "scheduler" or a caller label

    __table_args__ = (
        Index('idx_job_pipeline', 'pipeline_name'),
        Index('idx_job_status', 'status'),
        Index('idx_job_started_at', 'started_at'),
    )

    def __repr__(self) -> str:
        return f"<JobRun(run_id={self.run_id}, pipeline='{self.pipeline_name}', status='{self.status}')>"
