"""PMS-Safe and cycle settings, one row per user."""

from sqlalchemy import Column, Integer, Boolean, Date, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from hard75.database import Base


class UserSettings(Base):
    """Cycle configuration used to decide PMS window membership."""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)

    # PMS-Safe mode
    pms_safe_enabled = Column(Boolean, default=False, nullable=False)
    cycle_length = Column(Integer, default=28, nullable=False)  # days, typically 21-40
    pms_window_length = Column(Integer, default=7, nullable=False)  # days, typically 3-14
    cycle_day1_date = Column(Date, nullable=True)

    # Water goals (liters)
    water_goal_liters = Column(Float, default=3.8, nullable=False)
    pms_water_goal_liters = Column(Float, default=3.0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="settings")

    def __repr__(self):
        return (
            f"<UserSettings user={self.user_id} enabled={self.pms_safe_enabled} "
            f"cycle={self.cycle_length}/{self.pms_window_length}>"
        )
