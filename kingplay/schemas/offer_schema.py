"""Promotional offer data model."""

from typing import Optional, Union

from pydantic import Field, field_validator

from kingplay.schemas.wire import WireModel, coerce_bool


class Offer(WireModel):
    id: Optional[Union[int, str]] = None
    title: str
    description: str = ""
    is_active: bool = True
    created_at: Optional[str] = Field(default=None, alias="created_at")

    @field_validator("is_active", mode="before")
    @classmethod
    def _decode_active(cls, value):
        return coerce_bool(value)
