"""Account task endpoints."""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.api.endpoints.accounts import get_account_or_404
from app.db.models.task import Task, TaskStatus
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse

router = APIRouter(tags=["Tasks"])


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.task_id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


def stamp_completion(task: Task) -> None:
    """Keep completed_at in step with the task status."""
    if task.status == TaskStatus.COMPLETED:
        task.completed_at = task.completed_at or datetime.utcnow()
    else:
        task.completed_at = None


@router.get("/accounts/{account_id}/tasks", response_model=List[TaskResponse])
async def list_tasks(
    account_id: str,
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    """List an account's tasks."""
    get_account_or_404(db, account_id)
    query = db.query(Task).filter(Task.account_id == account_id)
    if status_filter:
        query = query.filter(Task.status == status_filter)
    return [TaskResponse.model_validate(task) for task in query.order_by(Task.task_id).all()]


@router.post("/accounts/{account_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    account_id: str,
    task_in: TaskCreate,
    db: Session = Depends(get_db)
):
    """Create a task on an account."""
    get_account_or_404(db, account_id)
    task = Task(account_id=account_id, **task_in.model_dump())
    stamp_completion(task)
    db.add(task)
    db.commit()
    db.refresh(task)
    return TaskResponse.model_validate(task)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    db: Session = Depends(get_db)
):
    """Update task."""
    task = get_task_or_404(db, task_id)
    for field, value in task_in.model_dump(exclude_unset=True).items():
        if field in ("name", "status") and value is None:
            continue
        setattr(task, field, value)
    stamp_completion(task)
    db.commit()
    db.refresh(task)
    return TaskResponse.model_validate(task)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    db: Session = Depends(get_db)
):
    """Delete task."""
    task = get_task_or_404(db, task_id)
    db.delete(task)
    db.commit()
