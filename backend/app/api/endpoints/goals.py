"""Account goal endpoints.

Goals belong to the warehouse-owned field set, so a successful sync
replaces any goals edited here.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.api.endpoints.accounts import get_account_or_404
from app.db.models.goal import Goal
from app.schemas.account import GoalIn, GoalUpdate, GoalResponse

router = APIRouter(tags=["Goals"])


def get_goal_or_404(db: Session, goal_id: int) -> Goal:
    goal = db.query(Goal).filter(Goal.goal_id == goal_id).first()
    if not goal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Goal not found"
        )
    return goal


@router.get("/accounts/{account_id}/goals", response_model=List[GoalResponse])
async def list_goals(
    account_id: str,
    db: Session = Depends(get_db)
):
    """List an account's goals in display order."""
    account = get_account_or_404(db, account_id)
    return [GoalResponse.model_validate(goal) for goal in account.goals]


@router.post("/accounts/{account_id}/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    account_id: str,
    goal_in: GoalIn,
    db: Session = Depends(get_db)
):
    """Append a goal to an account."""
    account = get_account_or_404(db, account_id)
    goal = Goal(position=len(account.goals), **goal_in.model_dump())
    account.goals.append(goal)
    db.commit()
    db.refresh(goal)
    return GoalResponse.model_validate(goal)


@router.put("/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    goal_in: GoalUpdate,
    db: Session = Depends(get_db)
):
    """Update goal."""
    goal = get_goal_or_404(db, goal_id)
    for field, value in goal_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(goal, field, value)
    db.commit()
    db.refresh(goal)
    return GoalResponse.model_validate(goal)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: int,
    db: Session = Depends(get_db)
):
    """Delete goal."""
    goal = get_goal_or_404(db, goal_id)
    db.delete(goal)
    db.commit()
