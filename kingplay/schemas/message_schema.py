"""Contact message data model."""

from typing import Optional, Union

from pydantic import Field

from kingplay.schemas.wire import WireModel


class Message(WireModel):
    """An inbound contact-form message."""
    id: Optional[Union[int, str]] = None
    name: str
    email: str
    message: str
    created_at: Optional[str] = Field(default=None, alias="created_at")
