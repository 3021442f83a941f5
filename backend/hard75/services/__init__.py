"""Services package."""

from hard75.services.auth_service import AuthService
from hard75.services.challenge_service import ChallengeService
from hard75.services.progress_service import ProgressService

__all__ = [
    "AuthService",
    "ChallengeService",
    "ProgressService",
]
