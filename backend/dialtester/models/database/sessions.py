"""
Recording session database model.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from dialtester.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class DialSession(Base):
    """One timed recording interval tied to a participant email."""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), nullable=False, index=True)  # not unique
    start_time = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, default=_utcnow, onupdate=_utcnow)

    # Read-side only; the application never deletes sessions
    data_points = relationship(
        "DataPoint",
        back_populates="session",
        order_by="DataPoint.timestamp",
    )

    __table_args__ = (
        CheckConstraint(
            "end_time IS NULL OR end_time >= start_time",
            name="ck_sessions_end_after_start",
        ),
    )
