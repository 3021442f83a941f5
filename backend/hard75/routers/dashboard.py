"""Dashboard router: today's tasks, stats and the 75-day timeline."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hard75.config import get_settings
from hard75.database import get_db
from hard75.models import User
from hard75.routers.auth import get_current_user
from hard75.schemas import CycleStatus, DashboardResponse, TimelineDay
from hard75.services.challenge_service import ChallengeService
from hard75.services.cycle_service import get_cycle_status
from hard75.services.progress_service import ProgressService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Build the dashboard.

    Settings are loaded once here and passed to everything that needs
    them. Days are seeded on first visit and today's tasks materialized.
    """
    today = date.today()
    service = ChallengeService(db)

    user_settings = service.ensure_user_settings(user)
    service.ensure_challenge_days(user, today=today)
    days = service.get_challenge_days(user)

    today_day = next((d for d in days if d.date == today), None)
    today_view = service.get_day_view(user, today_day, user_settings) if today_day else None

    day_number = service.get_current_day_number(user, today)

    if user_settings:
        cycle = get_cycle_status(user_settings, today)
    else:
        cycle = CycleStatus(
            enabled=False,
            configured=False,
            in_pms_window=False,
            water_goal_liters=get_settings().default_water_goal_liters,
        )

    timeline = [
        TimelineDay(
            day_number=d.day_number,
            date=d.date,
            is_completed=d.is_completed,
            is_future=d.date > today,
            is_current=d.day_number == day_number,
        )
        for d in days
    ]

    return DashboardResponse(
        day_number=day_number,
        total_days=service.total_days,
        streak=ProgressService.streak_from_days(reversed(days), today),
        completion_rate=ProgressService.completion_rate(days, today),
        is_pms_safe=bool(user_settings and user_settings.pms_safe_enabled),
        cycle=cycle,
        today=today_view,
        timeline=timeline,
    )
