"""Daily task model."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from hard75.database import Base
from hard75.catalog import display_title


class Task(Base):
    """One task of a challenge day, keyed by its catalog kind."""

    __tablename__ = "tasks"
    __table_args__ = (
        UniqueConstraint("challenge_day_id", "key", name="uq_tasks_day_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    challenge_day_id = Column(Integer, ForeignKey("challenge_days.id"), nullable=False, index=True)

    key = Column(String(30), nullable=False)  # workout1, workout2, water, read, diet, photo, rest_recovery
    title = Column(String(200), nullable=False)
    required = Column(Boolean, default=True, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    variant = Column(String(20), nullable=True)  # workout2 only: walk, yoga

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="tasks")
    challenge_day = relationship("ChallengeDay", back_populates="tasks")

    @property
    def display_title(self):
        """Title as shown, with the workout substitution applied."""
        return display_title(self.key, self.title, self.variant)

    def __repr__(self):
        return f"<Task {self.key} day={self.challenge_day_id} completed={self.completed}>"
