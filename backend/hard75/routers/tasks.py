"""Daily tasks API router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hard75.database import get_db
from hard75.models import User
from hard75.routers.auth import get_current_user
from hard75.schemas import TaskResponse, TaskUpdate
from hard75.services.challenge_service import ChallengeService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Toggle a task or choose the second workout's variant."""
    try:
        task = ChallengeService(db).update_task(user, task_id, task_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task
