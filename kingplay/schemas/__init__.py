from kingplay.schemas.booking_schema import Booking, BookingStatus
from kingplay.schemas.message_schema import Message
from kingplay.schemas.offer_schema import Offer
from kingplay.schemas.plan_schema import Plan
from kingplay.schemas.settings_schema import SiteSettings

__all__ = [
    "Booking",
    "BookingStatus",
    "Message",
    "Offer",
    "Plan",
    "SiteSettings",
]
