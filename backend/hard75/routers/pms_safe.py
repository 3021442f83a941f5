"""PMS-Safe settings and cycle status router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hard75.database import get_db
from hard75.models import User
from hard75.routers.auth import get_current_user
from hard75.schemas import CycleStatus, UserSettingsResponse, UserSettingsUpdate
from hard75.services.challenge_service import ChallengeService
from hard75.services.cycle_service import get_cycle_status

router = APIRouter(prefix="/pms-safe", tags=["pms-safe"])

SETTINGS_UNAVAILABLE = "Settings are unavailable right now. Please try again."


@router.get("/settings", response_model=UserSettingsResponse)
def get_settings_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Get cycle configuration, creating defaults on first use."""
    user_settings = ChallengeService(db).ensure_user_settings(user)
    if not user_settings:
        raise HTTPException(status_code=503, detail=SETTINGS_UNAVAILABLE)
    return user_settings


@router.put("/settings", response_model=UserSettingsResponse)
def update_settings(
    settings_data: UserSettingsUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Update cycle configuration.

    Already materialized days keep their task set; only days whose tasks
    are created afterwards see the new PMS window.
    """
    user_settings = ChallengeService(db).update_user_settings(user, settings_data)
    if not user_settings:
        raise HTTPException(status_code=503, detail=SETTINGS_UNAVAILABLE)
    return user_settings


@router.get("/status", response_model=CycleStatus)
def get_status(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Live PMS window status for today."""
    user_settings = ChallengeService(db).ensure_user_settings(user)
    if not user_settings:
        raise HTTPException(status_code=503, detail=SETTINGS_UNAVAILABLE)
    return get_cycle_status(user_settings)
