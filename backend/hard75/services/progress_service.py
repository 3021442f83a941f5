"""Progress analytics - streaks, completion rate, log distributions."""

from collections import Counter
from datetime import date
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from hard75.catalog import MOODS, SYMPTOMS, TASK_KEYS
from hard75.models import ChallengeDay, Task, User
from hard75.schemas import ProgressSummary
from hard75.services.challenge_service import ChallengeService


class ProgressService:
    """Service for deriving progress statistics from challenge days."""

    def __init__(self, db: Session):
        self.db = db

    def _days_descending(self, user: User) -> Sequence[ChallengeDay]:
        return (
            self.db.query(ChallengeDay)
            .filter(ChallengeDay.user_id == user.id)
            .order_by(ChallengeDay.day_number.desc())
            .all()
        )

    @staticmethod
    def streak_from_days(days_desc: Iterable[ChallengeDay], today: date) -> int:
        """
        Count consecutive completed days walking back from today.

        Future days are skipped. Today counts when completed but an
        unfinished today does not break the streak. The first incomplete
        earlier day ends it.
        """
        streak = 0
        for day in days_desc:
            if day.date > today:
                continue

            if day.date == today:
                if day.is_completed:
                    streak += 1
                continue

            if day.is_completed:
                streak += 1
            else:
                break

        return streak

    def calculate_streak(self, user: User, today: Optional[date] = None) -> int:
        """Current streak for a user."""
        today = today or date.today()
        return self.streak_from_days(self._days_descending(user), today)

    @staticmethod
    def completion_rate(days: Iterable[ChallengeDay], today: date) -> float:
        """Percentage of elapsed days that are completed, 0 when none elapsed."""
        elapsed = [d for d in days if d.date <= today]
        if not elapsed:
            return 0.0
        completed = sum(1 for d in elapsed if d.is_completed)
        return round(completed / len(elapsed) * 100, 1)

    @staticmethod
    def longest_streak(days: Iterable[ChallengeDay], today: date) -> int:
        """Longest run of consecutive completed days up to today."""
        longest = current = 0
        for day in sorted(days, key=lambda d: d.day_number):
            if day.date > today:
                break
            if day.is_completed:
                current += 1
                longest = max(longest, current)
            else:
                current = 0
        return longest

    def get_progress_summary(self, user: User, today: Optional[date] = None) -> ProgressSummary:
        """Aggregate everything the progress charts need."""
        today = today or date.today()
        days_desc = self._days_descending(user)
        elapsed = [d for d in days_desc if d.date <= today]

        challenge = ChallengeService(self.db)
        current_day_number = challenge.get_current_day_number(user, today)

        task_rows = (
            self.db.query(Task.key)
            .join(ChallengeDay, Task.challenge_day_id == ChallengeDay.id)
            .filter(
                Task.user_id == user.id,
                Task.completed == True,
                ChallengeDay.date <= today,
            )
            .all()
        )
        task_completion = {key: 0 for key in TASK_KEYS}
        task_completion.update(Counter(key for (key,) in task_rows))

        mood_counts = {mood: 0 for mood in MOODS}
        mood_counts.update(Counter(d.mood for d in elapsed if d.mood in mood_counts))

        symptom_counts = {symptom: 0 for symptom in SYMPTOMS}
        symptom_counts.update(Counter(
            s for d in elapsed for s in (d.symptoms or []) if s in symptom_counts
        ))

        return ProgressSummary(
            as_of=today,
            current_day_number=current_day_number,
            total_days=challenge.total_days,
            elapsed_days=len(elapsed),
            completed_days=sum(1 for d in elapsed if d.is_completed),
            completion_rate=self.completion_rate(elapsed, today),
            current_streak=self.streak_from_days(days_desc, today),
            longest_streak=self.longest_streak(elapsed, today),
            task_completion=task_completion,
            mood_counts=mood_counts,
            symptom_counts=symptom_counts,
        )
