"""Booking data models."""

from enum import Enum
from typing import Optional, Union

from pydantic import Field, field_validator

from kingplay.schemas.wire import WireModel, coerce_bool, coerce_str


class BookingStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Booking(WireModel):
    """A reservation as stored by the back-office.

    ``plan`` is the plan's display name at booking time, not a reference.
    """
    id: Optional[Union[int, str]] = None
    customer_name: str
    phone: str
    email: str
    dob: str = ""
    age: Optional[int] = None
    state: str = ""
    city: str = ""
    address: str = ""
    time: str = ""
    plan: str = ""
    special_requirements: str = ""
    status: BookingStatus = BookingStatus.PENDING
    date: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="created_at")
    agreed_to_legal: bool = False

    @field_validator("phone", "time", "dob", "special_requirements", mode="before")
    @classmethod
    def _stringify(cls, value):
        if value is None:
            return ""
        return coerce_str(value)

    @field_validator("age", mode="before")
    @classmethod
    def _blank_age(cls, value):
        return None if value == "" else value

    @field_validator("agreed_to_legal", mode="before")
    @classmethod
    def _decode_agreed(cls, value):
        if value is None:
            return False
        return coerce_bool(value)

    @property
    def is_pending(self) -> bool:
        return self.status == BookingStatus.PENDING
