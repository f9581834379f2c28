"""Site-wide settings singleton."""

from typing import Optional

from pydantic import Field, field_validator

from kingplay.schemas.wire import WireModel, coerce_bool, coerce_str_list


class SiteSettings(WireModel):
    """
    Display texts, disclaimer placement, and age-gate configuration.

    There is exactly one of these; it is replaced as a whole on save and
    never deleted. ``disclaimer_pages`` holds route paths such as "/booking".
    """
    id: Optional[int] = None
    site_title: str = ""
    terms_content: str = ""
    privacy_policy_content: str = ""
    disclaimer_text: str = ""
    disclaimer_pages: list[str] = Field(default_factory=list)
    age_gate_enabled: bool = True
    age_gate_title: str = ""
    age_gate_content: str = ""

    @field_validator("disclaimer_pages", mode="before")
    @classmethod
    def _decode_pages(cls, value):
        return coerce_str_list(value)

    @field_validator("age_gate_enabled", mode="before")
    @classmethod
    def _decode_enabled(cls, value):
        if value is None:
            return True
        return coerce_bool(value)

    def shows_disclaimer_on(self, page: str) -> bool:
        return page in self.disclaimer_pages
