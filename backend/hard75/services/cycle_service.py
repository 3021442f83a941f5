"""Menstrual cycle calculations for PMS-Safe mode.

The PMS window is the trailing ``pms_window_length`` days of every cycle.
A cycle repeats every ``cycle_length`` days from ``cycle_day1_date``, in
both directions, so dates before the configured day 1 are placed in the
cycle that precedes it.
"""

from datetime import date, timedelta
from typing import Optional

from hard75.models import UserSettings
from hard75.schemas import CycleStatus


def day_in_cycle(target_date: date, cycle_day1_date: date, cycle_length: int) -> int:
    """0-based position of a date within its cycle, always in [0, cycle_length)."""
    days_since_start = (target_date - cycle_day1_date).days
    # Non-negative for dates before cycle_day1_date too
    return ((days_since_start % cycle_length) + cycle_length) % cycle_length


def pms_start_day(settings: UserSettings) -> int:
    """0-based day of the cycle on which the PMS window opens."""
    return settings.cycle_length - settings.pms_window_length


def is_in_pms_window(target_date: date, settings: Optional[UserSettings]) -> bool:
    """Whether a date falls inside the PMS window of the configured cycle."""
    if settings is None or not settings.pms_safe_enabled or not settings.cycle_day1_date:
        return False

    position = day_in_cycle(target_date, settings.cycle_day1_date, settings.cycle_length)
    return position >= pms_start_day(settings)


def active_water_goal(settings: UserSettings, in_window: bool) -> float:
    if in_window:
        return settings.pms_water_goal_liters
    return settings.water_goal_liters


def get_cycle_status(settings: UserSettings, today: Optional[date] = None) -> CycleStatus:
    """Display figures for the PMS-Safe page. Nothing here is persisted."""
    today = today or date.today()
    configured = bool(settings.cycle_day1_date)
    enabled = bool(settings.pms_safe_enabled)

    if not (enabled and configured):
        return CycleStatus(
            enabled=enabled,
            configured=configured,
            in_pms_window=False,
            water_goal_liters=settings.water_goal_liters,
        )

    position = day_in_cycle(today, settings.cycle_day1_date, settings.cycle_length)
    start = pms_start_day(settings)
    in_window = position >= start

    if in_window:
        days_remaining = settings.cycle_length - position
        days_until = None
        next_start = today + timedelta(days=days_remaining + start)
    elif settings.pms_window_length <= 0:
        # Zero-length window never opens
        days_remaining = days_until = next_start = None
    else:
        days_remaining = None
        days_until = start - position
        next_start = today + timedelta(days=days_until)

    return CycleStatus(
        enabled=enabled,
        configured=configured,
        in_pms_window=in_window,
        day_in_cycle=position + 1,
        cycle_length=settings.cycle_length,
        pms_window_length=settings.pms_window_length,
        days_remaining_in_window=days_remaining,
        days_until_window=days_until,
        next_window_start=next_start,
        water_goal_liters=active_water_goal(settings, in_window),
    )
