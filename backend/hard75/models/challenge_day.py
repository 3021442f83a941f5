"""Challenge day model: one of the 75 tracked days."""

from sqlalchemy import (
    Column, Integer, Date, DateTime, ForeignKey, Text, String, Boolean, JSON, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from hard75.database import Base


class ChallengeDay(Base):
    """A single challenge day with its daily log."""

    __tablename__ = "challenge_days"
    __table_args__ = (
        UniqueConstraint("user_id", "day_number", name="uq_challenge_days_user_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)  # 1-75
    date = Column(Date, nullable=False, index=True)

    # Daily log
    notes = Column(Text, default="", nullable=False)
    mood = Column(String(20), nullable=True)  # Energetic, Okay, Low, Anxious
    symptoms = Column(JSON, default=list)  # ["cramps", "fatigue", ...]

    # Completion
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="challenge_days")
    tasks = relationship(
        "Task", back_populates="challenge_day", cascade="all, delete-orphan", order_by="Task.key"
    )

    def __repr__(self):
        return f"<ChallengeDay {self.day_number} - {self.date} completed={self.is_completed}>"
