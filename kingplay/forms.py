"""
Booking and contact form rules.

The booking form is collected in three steps: personal details, location
and plan, then the legal agreement. Each step has a gate that must pass
before the next one opens; validate() runs all three before submission.

Usage:
    form = BookingForm(full_name="Ananya R.", phone="9820012345", ...)
    form.step_errors(1)          # [] when step 1 may proceed
    booking = await submit_booking(api, form, plans)
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Sequence, Union

from kingplay.api.accessor import DataApi
from kingplay.config import settings
from kingplay.schemas.plan_schema import Plan
from kingplay.utils import compute_age, normalize_phone

logger = logging.getLogger(__name__)

# Validation thresholds
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
CUSTOM_PLAN_NAME = "Custom"

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

INDIAN_STATES: dict[str, list[str]] = {
    "Maharashtra": ["Mumbai", "Pune", "Nagpur", "Nashik"],
    "Delhi": ["New Delhi", "North Delhi", "South Delhi"],
    "Karnataka": ["Bangalore", "Mysore", "Hubli"],
    "Telangana": ["Hyderabad", "Warangal"],
    "Tamil Nadu": ["Chennai", "Coimbatore", "Madurai"],
    "West Bengal": ["Kolkata", "Howrah"],
    "Gujarat": ["Ahmedabad", "Surat", "Vadodara"],
    "Rajasthan": ["Jaipur", "Udaipur", "Jodhpur"],
    "Goa": ["Panaji", "Margao", "Calangute"],
}


class FormValidationError(ValueError):
    """Raised when a form is submitted with failing fields."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        summary = "; ".join(f"{name}: {msg}" for name, msg in errors.items())
        super().__init__(f"Form is incomplete - {summary}")


def cities_for(state: str) -> list[str]:
    """Cities offered for a state; empty for unknown states."""
    return list(INDIAN_STATES.get(state, []))


def _valid_phone(value: str) -> bool:
    digits = re.sub(r"[^\d]", "", value)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def _valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def _valid_time(value: str) -> bool:
    """Validate time is in HH:MM format."""
    try:
        datetime.strptime(value.strip(), "%H:%M")
        return True
    except ValueError:
        return False


def _missing(value: Optional[str]) -> bool:
    return not value or not value.strip()


@dataclass
class BookingForm:
    """State of the three-step reservation form."""

    full_name: str = ""
    phone: str = ""
    email: str = ""
    dob: str = ""
    state: str = ""
    city: str = ""
    address: str = ""
    time: str = ""
    plan_id: str = ""
    special_requirements: str = ""
    agreed_to_terms: bool = False
    today: Optional[date] = field(default=None, repr=False, compare=False)

    @property
    def age(self) -> Optional[int]:
        """Age derived from the date of birth, None while dob is blank or malformed."""
        if _missing(self.dob):
            return None
        try:
            return compute_age(self.dob, self.today)
        except ValueError:
            return None

    def select_state(self, state: str) -> None:
        """Choosing a state always clears the city."""
        self.state = state
        self.city = ""

    def step_errors(self, step: int) -> dict[str, str]:
        """Failing fields for one step of the form."""
        errors: dict[str, str] = {}
        if step == 1:
            if _missing(self.full_name):
                errors["full_name"] = "required"
            if _missing(self.phone):
                errors["phone"] = "required"
            elif not _valid_phone(self.phone):
                errors["phone"] = "not a valid phone number"
            if _missing(self.email):
                errors["email"] = "required"
            elif not _valid_email(self.email):
                errors["email"] = "not a valid email address"
            if _missing(self.dob):
                errors["dob"] = "required"
            elif self.age is None:
                errors["dob"] = "must be a YYYY-MM-DD date"
            elif self.age < settings.booking.minimum_age:
                errors["dob"] = (
                    f"Services are strictly for adults ({settings.booking.minimum_age}+)."
                )
        elif step == 2:
            if _missing(self.state):
                errors["state"] = "required"
            if _missing(self.city):
                errors["city"] = "required"
            elif self.state in INDIAN_STATES and self.city not in INDIAN_STATES[self.state]:
                errors["city"] = f"not a city in {self.state}"
            if _missing(self.address):
                errors["address"] = "required"
            if _missing(self.plan_id):
                errors["plan_id"] = "required"
            if _missing(self.time):
                errors["time"] = "required"
            elif not _valid_time(self.time):
                errors["time"] = "must be HH:MM"
        elif step == 3:
            if not self.agreed_to_terms:
                errors["agreed_to_terms"] = (
                    "You must explicitly agree to the Legal Compliance statement to proceed."
                )
        else:
            raise ValueError(f"Booking form has steps 1-3, got {step}")
        return errors

    def can_advance(self, step: int) -> bool:
        return not self.step_errors(step)

    def validate(self) -> None:
        """Raise FormValidationError if any step has failing fields."""
        errors: dict[str, str] = {}
        for step in (1, 2, 3):
            errors.update(self.step_errors(step))
        if errors:
            raise FormValidationError(errors)


def resolve_plan_name(plan_id: Union[int, str], plans: Sequence[Union[Plan, dict]]) -> str:
    """Plan display name for ``plan_id``, compared as strings; "Custom" if unknown."""
    for plan in plans:
        pid = plan.id if isinstance(plan, Plan) else plan.get("id")
        if str(pid) == str(plan_id):
            return plan.name if isinstance(plan, Plan) else str(plan.get("name", CUSTOM_PLAN_NAME))
    return CUSTOM_PLAN_NAME


def build_booking_payload(form: BookingForm, plans: Sequence[Union[Plan, dict]]) -> dict[str, Any]:
    """Wire payload for POST /bookings. The plan is denormalized to its name."""
    return {
        "customerName": form.full_name.strip(),
        "phone": normalize_phone(form.phone),
        "email": form.email.strip(),
        "dob": form.dob,
        "age": form.age,
        "state": form.state,
        "city": form.city,
        "address": form.address.strip(),
        "time": form.time,
        "plan": resolve_plan_name(form.plan_id, plans),
        "specialRequirements": form.special_requirements.strip(),
        "agreedToLegal": True,
    }


async def submit_booking(
    api: DataApi, form: BookingForm, plans: Optional[Sequence[Union[Plan, dict]]] = None
) -> Any:
    """Validate and create a booking. Offline, the booking lands in the mirror.

    Raises:
        FormValidationError: If any step of the form fails validation.
    """
    form.validate()
    if plans is None:
        plans = await api.get("/plans", [])
    payload = build_booking_payload(form, plans or [])
    result = await api.create("/bookings", payload)
    logger.info("Booking submitted for %s (%s)", payload["customerName"], payload["plan"])
    return result


@dataclass
class ContactForm:
    name: str = ""
    email: str = ""
    message: str = ""

    def errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if _missing(self.name):
            errors["name"] = "required"
        if _missing(self.email):
            errors["email"] = "required"
        elif not _valid_email(self.email):
            errors["email"] = "not a valid email address"
        if _missing(self.message):
            errors["message"] = "required"
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise FormValidationError(errors)


async def submit_message(api: DataApi, form: ContactForm) -> Any:
    """Validate and send a contact message."""
    form.validate()
    return await api.create("/messages", {k: v.strip() for k, v in asdict(form).items()})
