"""Pipeline run history endpoints."""
import json
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.models.job_run import JobRun, JobStatus

router = APIRouter(prefix="/pipelines", tags=["Pipelines"])

EMPTY_COUNTERS = {"total": 0, "merged": 0, "skipped": 0, "failed": 0}


def parse_counters(counters_json: Optional[str]) -> dict:
    """Parse counters JSON, falling back to zeroed counters."""
    try:
        if counters_json:
            counters = json.loads(counters_json)
            return {key: int(counters.get(key, 0)) for key in EMPTY_COUNTERS}
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
        pass
    return dict(EMPTY_COUNTERS)


def run_to_dict(run: JobRun) -> dict:
    return {
        "run_id": run.run_id,
        "pipeline_name": run.pipeline_name,
        "started_at": run.started_at,
        "ended_at": run.ended_at,
        "status": run.status.value if run.status else None,
        "counters": parse_counters(run.counters_json),
        "error_message": run.error_message,
        "triggered_by": run.triggered_by
    }


@router.get("/runs")
async def list_job_runs(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    pipeline_name: Optional[str] = None,
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    """List pipeline job runs, newest first."""
    query = db.query(JobRun)

    if pipeline_name:
        query = query.filter(JobRun.pipeline_name == pipeline_name)
    if status_filter:
        query = query.filter(JobRun.status == status_filter)

    runs = query.order_by(JobRun.started_at.desc(), JobRun.run_id.desc()).offset(skip).limit(limit).all()
    return [run_to_dict(r) for r in runs]


@router.get("/runs/{run_id}")
async def get_job_run(
    run_id: int,
    db: Session = Depends(get_db)
):
    """Get job run details."""
    run = db.query(JobRun).filter(JobRun.run_id == run_id).first()
    if not run:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job run not found"
        )
    return run_to_dict(run)
