"""Shared base model and coercions for records as they travel over the wire.

The spreadsheet backend flattens every cell to a scalar, so list fields can
arrive JSON-encoded and booleans can arrive as the strings "true"/"false".
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Unknown fields are kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with wire (camelCase) field names, as the API expects."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


def coerce_bool(value: Any) -> Any:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered in ("false", ""):
            return False
    return value


def coerce_str_list(value: Any) -> Any:
    """Decode a JSON-encoded list; pass everything else through for validation."""
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return []
        try:
            decoded = json.loads(stripped)
        except json.JSONDecodeError:
            return [stripped]
        return decoded
    if value is None:
        return []
    return value


def coerce_str(value: Any) -> Any:
    """Spreadsheet cells holding digits come back as numbers."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value
