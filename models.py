from datetime import date, datetime, time
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Largest value a signed 64-bit INTEGER column holds
MAX_DB_INT = 2**63 - 1
MINUTES_PER_DAY = 24 * 60


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GymClassRequest(CamelModel):
    name: str
    start_date: date
    end_date: date
    start_time: time
    # lower bounds are checked by the catalog itself
    duration: int = Field(le=MINUTES_PER_DAY)
    capacity: int = Field(le=MAX_DB_INT)


class GymClassOut(CamelModel):
    id: int
    name: str
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    duration: int
    capacity: int
    available_slots: Optional[int] = None  # only set when listing for a given date


class BookRequest(CamelModel):
    member_name: str
    gym_class_id: int = Field(ge=1, le=MAX_DB_INT)
    participation_date: date


class BookingOut(CamelModel):
    id: int
    member_name: str
    gym_class_id: int
    gym_class_name: str
    participation_date: date


class GenericResponse(CamelModel, Generic[T]):
    """Envelope wrapped around every API response."""
    data: Optional[T] = None
    message: str
    success: bool
    status_code: int
    error_code: Optional[str] = None
    timestamp: datetime


