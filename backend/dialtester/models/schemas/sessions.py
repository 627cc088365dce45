"""
Pydantic schemas for recording sessions.
"""
import enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from dialtester.models.schemas.common import UTCDateTime
from dialtester.models.schemas.data_points import DataPointResponse


class SessionAction(str, enum.Enum):
    """Actions accepted by PATCH /sessions/{id}."""
    COMPLETE = "complete"


class SessionCreate(BaseModel):
    """Schema for starting a recording session."""
    email: str = Field(..., max_length=320, description="Participant identifier (free text)")

    @field_validator("email", mode="before")
    @classmethod
    def email_not_blank(cls, v):
        if v is None or not isinstance(v, str) or not v.strip():
            raise ValueError("Email is required")
        return v.strip()


class SessionUpdate(BaseModel):
    """Schema for updating a recording session."""
    action: SessionAction = Field(..., description="Only 'complete' is supported")


class SessionStats(BaseModel):
    """Summary statistics over one session's values."""
    highest: int = 0
    lowest: int = 0
    average: float = 0
    mode: int = 0


class SessionResponse(BaseModel):
    """Schema for a session row."""
    id: str
    email: str
    start_time: UTCDateTime
    end_time: Optional[UTCDateTime] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None

    class Config:
        from_attributes = True


class SessionDetailResponse(SessionResponse):
    """Session with its nested data points."""
    data_points: List[DataPointResponse] = Field(default_factory=list)
    stats: Optional[SessionStats] = None


class SessionEnvelope(BaseModel):
    session: SessionResponse


class SessionDetailEnvelope(BaseModel):
    session: SessionDetailResponse


class SessionListResponse(BaseModel):
    sessions: List[SessionDetailResponse]
