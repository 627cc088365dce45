"""
Data points database model for sampled dial values.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from dialtester.core.database import Base
from dialtester.models.database.sessions import _new_id, _utcnow

MIN_VALUE = -100
MAX_VALUE = 100


class DataPoint(Base):
    """One sampled emotional-response value belonging to a session."""

    __tablename__ = "data_points"

    id = Column(String(36), primary_key=True, default=_new_id)
    session_id = Column(String(36), ForeignKey("sessions.id"), nullable=False, index=True)
    value = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    session = relationship("DialSession", back_populates="data_points")

    __table_args__ = (
        CheckConstraint(
            f"value >= {MIN_VALUE} AND value <= {MAX_VALUE}",
            name="ck_data_points_value_range",
        ),
        Index('idx_data_points_session_timestamp', 'session_id', 'timestamp'),
    )
