"""Pydantic schemas for API request/response validation."""

import math

from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict
from datetime import datetime, date

from hard75.config import get_settings
from hard75.catalog import MOODS, SYMPTOMS, WORKOUT2_VARIANTS


# ============== Settings Schemas ==============

# Longest cycle or window the settings form accepts
MAX_CYCLE_DAYS = 366


def _fallback_int(value, default: int, minimum: int, maximum: int = MAX_CYCLE_DAYS):
    """Coerce form input to an int, falling back to the default when unusable."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number) or not minimum <= number <= maximum:
        return default
    return int(number)


def _fallback_float(value, default: float):
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number) or number <= 0:
        return default
    return number


class UserSettingsUpdate(BaseModel):
    """Partial update from the PMS-Safe settings form.

    Malformed numbers never fail the request: they are replaced with the
    configured defaults before validation.
    """
    pms_safe_enabled: Optional[bool] = None
    cycle_length: Optional[int] = None
    pms_window_length: Optional[int] = None
    cycle_day1_date: Optional[date] = None
    water_goal_liters: Optional[float] = None
    pms_water_goal_liters: Optional[float] = None

    @field_validator("cycle_length", mode="before")
    @classmethod
    def _cycle_length(cls, v):
        return _fallback_int(v, get_settings().default_cycle_length, minimum=1)

    @field_validator("pms_window_length", mode="before")
    @classmethod
    def _pms_window_length(cls, v):
        return _fallback_int(v, get_settings().default_pms_window_length, minimum=0)

    @field_validator("water_goal_liters", mode="before")
    @classmethod
    def _water_goal(cls, v):
        return _fallback_float(v, get_settings().default_water_goal_liters)

    @field_validator("pms_water_goal_liters", mode="before")
    @classmethod
    def _pms_water_goal(cls, v):
        return _fallback_float(v, get_settings().default_pms_water_goal_liters)

    @field_validator("cycle_day1_date", mode="before")
    @classmethod
    def _blank_date(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UserSettingsResponse(BaseModel):
    user_id: int
    pms_safe_enabled: bool
    cycle_length: int
    pms_window_length: int
    cycle_day1_date: Optional[date] = None
    water_goal_liters: float
    pms_water_goal_liters: float
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CycleStatus(BaseModel):
    """Live PMS-Safe status for display."""
    enabled: bool
    configured: bool
    in_pms_window: bool
    day_in_cycle: Optional[int] = None  # 1-based
    cycle_length: Optional[int] = None
    pms_window_length: Optional[int] = None
    days_remaining_in_window: Optional[int] = None
    days_until_window: Optional[int] = None
    next_window_start: Optional[date] = None
    water_goal_liters: float


# ============== Task Schemas ==============

class TaskResponse(BaseModel):
    id: int
    challenge_day_id: int
    key: str
    title: str
    display_title: str
    required: bool
    completed: bool
    variant: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaskUpdate(BaseModel):
    completed: Optional[bool] = None
    variant: Optional[str] = None  # "walk", "yoga", or "normal" to clear

    @field_validator("variant")
    @classmethod
    def _variant(cls, v):
        if v is None:
            return v
        if v != "normal" and v not in WORKOUT2_VARIANTS:
            raise ValueError(f"variant must be one of: normal, {', '.join(WORKOUT2_VARIANTS)}")
        return v


# ============== Challenge Day Schemas ==============

class ChallengeDayBase(BaseModel):
    day_number: int
    date: date
    notes: str = ""
    mood: Optional[str] = None
    symptoms: List[str] = []
    is_completed: bool = False
    completed_at: Optional[datetime] = None


class ChallengeDayResponse(ChallengeDayBase):
    id: int
    user_id: int

    @field_validator("symptoms", mode="before")
    @classmethod
    def _none_symptoms(cls, v):
        return v or []

    class Config:
        from_attributes = True


class ChallengeDayWithTasks(ChallengeDayResponse):
    """Challenge day with its tasks and PMS context."""
    is_pms_window: bool = False
    tasks: List[TaskResponse] = []

    class Config:
        from_attributes = True


class ChallengeDayUpdate(BaseModel):
    """Log form: notes, mood and symptoms."""
    notes: Optional[str] = None
    mood: Optional[str] = None
    symptoms: Optional[List[str]] = None

    @field_validator("mood")
    @classmethod
    def _mood(cls, v):
        if v is None or v == "":
            return v
        if v not in MOODS:
            raise ValueError(f"mood must be one of: {', '.join(MOODS)}")
        return v

    @field_validator("symptoms")
    @classmethod
    def _symptoms(cls, v):
        if v is None:
            return v
        unknown = [s for s in v if s not in SYMPTOMS]
        if unknown:
            raise ValueError(f"unknown symptoms: {', '.join(unknown)}")
        # Keep first occurrence order
        return list(dict.fromkeys(v))


class TimelineDay(BaseModel):
    day_number: int
    date: date
    is_completed: bool
    is_future: bool
    is_current: bool


# ============== Dashboard & Progress Schemas ==============

class DashboardResponse(BaseModel):
    """Everything the dashboard view renders."""
    day_number: int
    total_days: int
    streak: int
    completion_rate: float
    is_pms_safe: bool
    cycle: CycleStatus
    today: Optional[ChallengeDayWithTasks] = None
    timeline: List[TimelineDay] = []


class StreakResponse(BaseModel):
    streak: int
    as_of: date


class ProgressSummary(BaseModel):
    """Aggregates behind the progress charts."""
    as_of: date
    current_day_number: int
    total_days: int
    elapsed_days: int
    completed_days: int
    completion_rate: float
    current_streak: int
    longest_streak: int
    task_completion: Dict[str, int] = {}
    mood_counts: Dict[str, int] = {}
    symptom_counts: Dict[str, int] = {}
