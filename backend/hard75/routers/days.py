"""Challenge days and daily log API router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from datetime import date

from hard75.database import get_db
from hard75.models import User
from hard75.routers.auth import get_current_user
from hard75.schemas import (
    ChallengeDayResponse,
    ChallengeDayUpdate,
    ChallengeDayWithTasks,
)
from hard75.services.challenge_service import ChallengeService

router = APIRouter(prefix="/days", tags=["days"])


@router.get("/", response_model=List[ChallengeDayResponse])
def list_days(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List all challenge days in order."""
    service = ChallengeService(db)
    service.ensure_challenge_days(user)
    return service.get_challenge_days(user)


@router.get("/today", response_model=ChallengeDayWithTasks)
def get_today(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Get today's challenge day with its tasks."""
    service = ChallengeService(db)
    service.ensure_challenge_days(user)
    day = service.get_challenge_day_by_date(user, date.today())
    if not day:
        raise HTTPException(status_code=404, detail="Today is outside the challenge")
    return service.get_day_view(user, day, service.get_user_settings(user))


@router.get("/{day_number}", response_model=ChallengeDayWithTasks)
def get_day(
    day_number: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Get a challenge day by number, materializing its tasks."""
    service = ChallengeService(db)
    service.ensure_challenge_days(user)
    day = service.get_challenge_day(user, day_number)
    if not day:
        raise HTTPException(status_code=404, detail="Challenge day not found")
    return service.get_day_view(user, day, service.get_user_settings(user))


@router.patch("/{day_number}", response_model=ChallengeDayResponse)
def update_day(
    day_number: int,
    day_data: ChallengeDayUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Save notes, mood and symptoms for a day."""
    day = ChallengeService(db).update_challenge_day(user, day_number, day_data)
    if not day:
        raise HTTPException(status_code=404, detail="Challenge day not found")
    return day
