"""Challenge day and task materialization.

Days and tasks are created lazily and idempotently: every ``ensure_*``
method only inserts what is missing and never rewrites existing rows.
Seeding is best effort; store errors are logged and swallowed so callers
carry on with whatever was created.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hard75.catalog import DEFAULT_TASKS, TASKS_BY_KEY, VARIANT_TASK_KEY, task_keys_for_day
from hard75.config import get_settings
from hard75.models import ChallengeDay, Task, User, UserSettings
from hard75.schemas import ChallengeDayUpdate, ChallengeDayWithTasks, TaskUpdate, UserSettingsUpdate
from hard75.services.cycle_service import is_in_pms_window

logger = logging.getLogger(__name__)


class ChallengeService:
    """Service for the 75-day challenge records of a user."""

    def __init__(self, db: Session):
        self.db = db
        self.total_days = get_settings().challenge_length_days

    # ============== Settings ==============

    def get_user_settings(self, user: User) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user.id).first()

    def ensure_user_settings(self, user: User) -> Optional[UserSettings]:
        """Get the user's settings, creating them with defaults on first use."""
        existing = self.get_user_settings(user)
        if existing:
            return existing

        defaults = get_settings()
        user_settings = UserSettings(
            user_id=user.id,
            pms_safe_enabled=False,
            cycle_length=defaults.default_cycle_length,
            pms_window_length=defaults.default_pms_window_length,
            water_goal_liters=defaults.default_water_goal_liters,
            pms_water_goal_liters=defaults.default_pms_water_goal_liters,
        )
        try:
            self.db.add(user_settings)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error creating user settings for user %s", user.id)
            self.db.rollback()
            return None
        self.db.refresh(user_settings)
        return user_settings

    def update_user_settings(self, user: User, data: UserSettingsUpdate) -> Optional[UserSettings]:
        """Apply a settings form, clamping the PMS window to the cycle length."""
        user_settings = self.ensure_user_settings(user)
        if user_settings is None:
            return None

        for field, value in data.model_dump(exclude_unset=True).items():
            # cycle_day1_date may be cleared, everything else needs a value
            if value is None and field != "cycle_day1_date":
                continue
            setattr(user_settings, field, value)

        if user_settings.pms_window_length > user_settings.cycle_length:
            logger.warning(
                "PMS window %s exceeds cycle length %s for user %s, clamping",
                user_settings.pms_window_length, user_settings.cycle_length, user.id,
            )
            user_settings.pms_window_length = user_settings.cycle_length

        self.db.commit()
        self.db.refresh(user_settings)
        return user_settings

    # ============== Challenge days ==============

    def get_challenge_start_date(self, user: User) -> Optional[date]:
        """Date of day 1, if it exists."""
        day1 = self.get_challenge_day(user, 1)
        return day1.date if day1 else None

    def ensure_challenge_days(self, user: User, today: Optional[date] = None) -> None:
        """Make sure all challenge days exist, seeding from today on first use."""
        today = today or date.today()
        try:
            rows = (
                self.db.query(ChallengeDay.day_number, ChallengeDay.date)
                .filter(ChallengeDay.user_id == user.id)
                .all()
            )
            existing = {number: day_date for number, day_date in rows}
            missing = [n for n in range(1, self.total_days + 1) if n not in existing]
            if not missing:
                return

            start_date = self._anchor_date(existing, today)
            self.db.add_all([
                ChallengeDay(
                    user_id=user.id,
                    day_number=n,
                    date=start_date + timedelta(days=n - 1),
                    notes="",
                    symptoms=[],
                )
                for n in missing
            ])
            self.db.commit()
            logger.info("Created %d challenge days for user %s from %s", len(missing), user.id, start_date)
        except SQLAlchemyError:
            logger.exception("Error creating challenge days for user %s", user.id)
            self.db.rollback()

    @staticmethod
    def _anchor_date(existing: Dict[int, date], today: date) -> date:
        """Day 1 date implied by already-created days, else today."""
        if not existing:
            return today
        if 1 in existing:
            return existing[1]
        first = min(existing)
        return existing[first] - timedelta(days=first - 1)

    def get_challenge_days(self, user: User) -> List[ChallengeDay]:
        return (
            self.db.query(ChallengeDay)
            .filter(ChallengeDay.user_id == user.id)
            .order_by(ChallengeDay.day_number)
            .all()
        )

    def get_challenge_day(self, user: User, day_number: int) -> Optional[ChallengeDay]:
        return (
            self.db.query(ChallengeDay)
            .filter(ChallengeDay.user_id == user.id, ChallengeDay.day_number == day_number)
            .first()
        )

    def get_challenge_day_by_date(self, user: User, target_date: date) -> Optional[ChallengeDay]:
        return (
            self.db.query(ChallengeDay)
            .filter(ChallengeDay.user_id == user.id, ChallengeDay.date == target_date)
            .first()
        )

    def get_current_day_number(self, user: User, today: Optional[date] = None) -> int:
        """Day number for today, clamped to the challenge range."""
        today = today or date.today()
        day = self.get_challenge_day_by_date(user, today)
        if day:
            return day.day_number

        start_date = self.get_challenge_start_date(user)
        if start_date and today > start_date:
            return self.total_days
        return 1

    def update_challenge_day(
        self, user: User, day_number: int, data: ChallengeDayUpdate
    ) -> Optional[ChallengeDay]:
        """Save the daily log (notes, mood, symptoms)."""
        day = self.get_challenge_day(user, day_number)
        if not day:
            return None

        updates = data.model_dump(exclude_unset=True)
        if "notes" in updates:
            day.notes = updates["notes"] or ""
        if "mood" in updates:
            day.mood = updates["mood"] or None
        if "symptoms" in updates:
            day.symptoms = list(updates["symptoms"] or [])

        self.db.commit()
        self.db.refresh(day)
        return day

    # ============== Tasks ==============

    def _new_tasks(self, user: User, day: ChallengeDay, is_pms_window: bool, existing: Set[str]) -> List[Task]:
        # PMS-only membership is decided when the day first gets tasks
        if existing:
            is_pms_window = any(t.pms_only and t.key in existing for t in DEFAULT_TASKS)

        tasks = []
        for key in task_keys_for_day(is_pms_window):
            if key in existing:
                continue
            definition = TASKS_BY_KEY[key]
            tasks.append(Task(
                user_id=user.id,
                challenge_day_id=day.id,
                key=definition.key,
                title=definition.title,
                required=definition.required,
                completed=False,
            ))
        return tasks

    def ensure_tasks(self, user: User, day: ChallengeDay, is_pms_window: bool) -> None:
        """Create the day's missing tasks. Existing tasks are left untouched."""
        try:
            existing = {
                key for (key,) in
                self.db.query(Task.key).filter(Task.challenge_day_id == day.id).all()
            }
            tasks = self._new_tasks(user, day, is_pms_window, existing)
            if not tasks:
                return
            self.db.add_all(tasks)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error creating tasks for challenge day %s", day.id)
            self.db.rollback()

    def ensure_day_tasks(
        self, user: User, day: ChallengeDay, settings: Optional[UserSettings]
    ) -> bool:
        """Materialize a day's tasks from its PMS status. Returns that status."""
        pms = is_in_pms_window(day.date, settings)
        self.ensure_tasks(user, day, pms)
        return pms

    def get_day_view(
        self, user: User, day: ChallengeDay, settings: Optional[UserSettings]
    ) -> ChallengeDayWithTasks:
        """Challenge day with its (materialized) tasks."""
        pms = self.ensure_day_tasks(user, day, settings)
        view = ChallengeDayWithTasks.model_validate(day)
        return view.model_copy(update={"is_pms_window": pms})

    def get_tasks(self, day: ChallengeDay) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(Task.challenge_day_id == day.id)
            .order_by(Task.key)
            .all()
        )

    def get_task(self, user: User, task_id: int) -> Optional[Task]:
        return (
            self.db.query(Task)
            .filter(Task.id == task_id, Task.user_id == user.id)
            .first()
        )

    def update_task(self, user: User, task_id: int, data: TaskUpdate) -> Optional[Task]:
        """Toggle completion or pick a workout variant, then refresh the day."""
        task = self.get_task(user, task_id)
        if not task:
            return None

        updates = data.model_dump(exclude_unset=True)
        if updates.get("variant") is not None:
            if task.key != VARIANT_TASK_KEY:
                raise ValueError(f"Task '{task.key}' has no variants")
            task.variant = None if updates["variant"] == "normal" else updates["variant"]
        if updates.get("completed") is not None:
            task.completed = updates["completed"]

        self.refresh_day_completion(task.challenge_day)
        self.db.commit()
        self.db.refresh(task)
        return task

    def refresh_day_completion(self, day: ChallengeDay) -> bool:
        """A day is complete once all its required tasks are."""
        required = [t for t in day.tasks if t.required]
        completed = bool(required) and all(t.completed for t in required)

        if completed and not day.is_completed:
            day.completed_at = datetime.utcnow()
        elif not completed:
            day.completed_at = None
        day.is_completed = completed
        return completed

    # ============== Seeding ==============

    def seed_user_data(self, user: User, today: Optional[date] = None) -> None:
        """Full seed: settings, all days, and tasks for every day."""
        self.ensure_user_settings(user)
        self.ensure_challenge_days(user, today=today)

        user_settings = self.get_user_settings(user)
        if user_settings is None:
            return

        try:
            days = self.get_challenge_days(user)
            existing: Dict[int, Set[str]] = {}
            for day_id, key in (
                self.db.query(Task.challenge_day_id, Task.key)
                .filter(Task.user_id == user.id)
                .all()
            ):
                existing.setdefault(day_id, set()).add(key)

            tasks = []
            for day in days:
                pms = is_in_pms_window(day.date, user_settings)
                tasks.extend(self._new_tasks(user, day, pms, existing.get(day.id, set())))
            if tasks:
                self.db.add_all(tasks)
                self.db.commit()
                logger.info("Created %d tasks for user %s", len(tasks), user.id)
        except SQLAlchemyError:
            logger.exception("Error seeding tasks for user %s", user.id)
            self.db.rollback()
