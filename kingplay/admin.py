"""
Back-office dashboard aggregation and small admin helpers.

load_dashboard() reads every table the dashboard shows, in the order the
dashboard renders them, and records whether each one came from the live
server or from the local mirror.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from kingplay.api.accessor import DataSource
from kingplay.repositories import Repositories
from kingplay.schemas.booking_schema import Booking, BookingStatus
from kingplay.schemas.message_schema import Message
from kingplay.schemas.offer_schema import Offer
from kingplay.schemas.plan_schema import Plan
from kingplay.schemas.settings_schema import SiteSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminStats:
    total_bookings: int = 0
    pending_bookings: int = 0
    messages: int = 0
    active_plans: int = 0


@dataclass
class DashboardSnapshot:
    """Everything the admin dashboard renders in one refresh."""

    bookings: list[Booking] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    plans: list[Plan] = field(default_factory=list)
    offers: list[Offer] = field(default_factory=list)
    settings: SiteSettings = field(default_factory=SiteSettings)
    sources: dict[str, DataSource] = field(default_factory=dict)

    @property
    def stats(self) -> AdminStats:
        return compute_stats(self.bookings, self.messages, self.plans)

    @property
    def is_live(self) -> bool:
        """True only if every collection was served by the remote."""
        return bool(self.sources) and all(s == DataSource.REMOTE for s in self.sources.values())


def compute_stats(
    bookings: Sequence[Booking], messages: Sequence[Message], plans: Sequence[Plan]
) -> AdminStats:
    return AdminStats(
        total_bookings=len(bookings),
        pending_bookings=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
        messages=len(messages),
        active_plans=len(plans),
    )


async def load_dashboard(repos: Repositories) -> DashboardSnapshot:
    """Refresh all dashboard tables. Never raises for an unreachable server."""
    snapshot = DashboardSnapshot()
    snapshot.bookings, result = await repos.bookings.fetch_all()
    snapshot.sources["bookings"] = result.source
    snapshot.messages, result = await repos.messages.fetch_all()
    snapshot.sources["messages"] = result.source
    snapshot.plans, result = await repos.plans.fetch_all()
    snapshot.sources["plans"] = result.source
    snapshot.offers, result = await repos.offers.fetch_all()
    snapshot.sources["offers"] = result.source
    snapshot.settings, result = await repos.settings.fetch()
    snapshot.sources["settings"] = result.source

    if not snapshot.is_live:
        logger.info("Dashboard served partly from local data: %s",
                    {k: v.value for k, v in snapshot.sources.items()})
    return snapshot


def parse_features(raw: str) -> list[str]:
    """Split the comma-separated features input, dropping blanks.

    Examples:
        >>> parse_features("Dinner Companion, Event Partner, ,")
        ['Dinner Companion', 'Event Partner']
    """
    return [part.strip() for part in raw.split(",") if part.strip()]


def toggle_disclaimer_page(site_settings: SiteSettings, page: str) -> SiteSettings:
    """Copy of the settings with ``page`` added to or removed from the disclaimer pages."""
    pages = list(site_settings.disclaimer_pages)
    if page in pages:
        pages = [p for p in pages if p != page]
    else:
        pages.append(page)
    return site_settings.model_copy(update={"disclaimer_pages": pages})


def active_offers(offers: Sequence[Offer]) -> list[Offer]:
    """Offers the public home page should show."""
    return [o for o in offers if o.is_active]
