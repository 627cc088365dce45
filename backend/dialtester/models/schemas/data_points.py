"""
Pydantic schemas for sampled data points.
"""
import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dialtester.models.database.data_points import MIN_VALUE, MAX_VALUE
from dialtester.models.schemas.common import UTCDateTime

VALUE_RANGE_MESSAGE = f"Value must be a number between {MIN_VALUE} and {MAX_VALUE}"


def coerce_dial_value(value: Any) -> int:
    """
    Coerce an incoming dial value to an integer in [MIN_VALUE, MAX_VALUE].

    Numeric strings are parsed. Booleans, NaN, infinities, fractional
    numbers and out-of-range values are rejected with ``ValueError``.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(VALUE_RANGE_MESSAGE)

    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValueError(VALUE_RANGE_MESSAGE) from None
    elif isinstance(value, int):
        # Range-check ints directly; huge ones overflow float()
        if value < MIN_VALUE or value > MAX_VALUE:
            raise ValueError(VALUE_RANGE_MESSAGE)
        return value
    elif isinstance(value, float):
        number = value
    else:
        raise ValueError(VALUE_RANGE_MESSAGE)

    if math.isnan(number) or number < MIN_VALUE or number > MAX_VALUE:
        raise ValueError(VALUE_RANGE_MESSAGE)
    if not number.is_integer():
        raise ValueError("Value must be a whole number")

    return int(number)


class DataPointCreate(BaseModel):
    """Schema for persisting one sampled value."""
    session_id: str = Field(..., min_length=1, max_length=36)
    value: int
    timestamp: Optional[UTCDateTime] = Field(None, description="Defaults to the time of receipt")

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v):
        return coerce_dial_value(v)


class DataPointResponse(BaseModel):
    """Schema for a data point row."""
    id: str
    session_id: str
    value: int
    timestamp: UTCDateTime

    class Config:
        from_attributes = True


class DataPointEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data_point: DataPointResponse = Field(..., alias="dataPoint")
