"""Database models package."""

from hard75.models.user import User
from hard75.models.user_settings import UserSettings
from hard75.models.challenge_day import ChallengeDay
from hard75.models.task import Task

__all__ = [
    "User",
    "UserSettings",
    "ChallengeDay",
    "Task",
]
