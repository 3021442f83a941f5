"""Progress analytics router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date

from hard75.database import get_db
from hard75.models import User
from hard75.routers.auth import get_current_user
from hard75.schemas import ProgressSummary, StreakResponse
from hard75.services.progress_service import ProgressService

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/", response_model=ProgressSummary)
def get_progress(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Aggregated stats for the progress charts."""
    return ProgressService(db).get_progress_summary(user)


@router.get("/streak", response_model=StreakResponse)
def get_streak(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Current streak of completed days."""
    today = date.today()
    return StreakResponse(
        streak=ProgressService(db).calculate_streak(user, today),
        as_of=today,
    )
