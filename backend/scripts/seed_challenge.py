"""Materialize challenge days and tasks for every user."""
import logging

from hard75.database import SessionLocal, engine, Base
from hard75.logging_config import setup_logging
from hard75.models import User
from hard75.services.challenge_service import ChallengeService

logger = logging.getLogger("seed_challenge")


def seed_challenge():
    """Run the full seed routine for all active users."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        users = db.query(User).filter(User.is_active == True).all()
        logger.info("Seeding %d users", len(users))

        service = ChallengeService(db)
        for user in users:
            service.seed_user_data(user)
            days = service.get_challenge_days(user)
            logger.info("  User %s: %d days, starting %s", user.id, len(days), days[0].date if days else None)

        logger.info("Seed complete!")
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed_challenge()
