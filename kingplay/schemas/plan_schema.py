"""Plan catalog data model."""

from typing import Optional, Union

from pydantic import Field, field_validator

from kingplay.schemas.wire import WireModel, coerce_bool, coerce_str_list


class Plan(WireModel):
    """A bookable companionship plan."""
    id: Optional[Union[int, str]] = None
    name: str
    price: str
    duration: str
    features: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    is_popular: bool = False

    @field_validator("features", mode="before")
    @classmethod
    def _decode_features(cls, value):
        return coerce_str_list(value)

    @field_validator("is_popular", mode="before")
    @classmethod
    def _decode_popular(cls, value):
        if value is None:
            return False
        return coerce_bool(value)

    @field_validator("price", "duration", mode="before")
    @classmethod
    def _stringify(cls, value):
        return str(value) if isinstance(value, (int, float)) else value
