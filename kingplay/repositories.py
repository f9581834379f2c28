"""
Typed per-entity repositories on top of the DataApi.

Each repository owns one endpoint path and converts between wire dicts and
pydantic models. All fallback behavior lives in DataApi; repositories only
shape payloads and parse results. Records that fail validation are skipped
with a warning so one bad spreadsheet row cannot blank a whole table.
"""

import logging
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from kingplay.api.accessor import DataApi, FetchResult, SETTINGS_PATH
from kingplay.schemas.booking_schema import Booking, BookingStatus
from kingplay.schemas.message_schema import Message
from kingplay.schemas.offer_schema import Offer
from kingplay.schemas.plan_schema import Plan
from kingplay.schemas.settings_schema import SiteSettings
from kingplay.schemas.wire import WireModel
from kingplay.store.defaults import get_default

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=WireModel)
RecordId = Union[int, str]


class CollectionRepository(Generic[ModelT]):
    """List/add/update/remove for one keyed collection."""

    path: str = ""
    model: type[WireModel] = WireModel

    def __init__(self, api: DataApi) -> None:
        self.api = api

    def _parse_all(self, raw: Any) -> list[ModelT]:
        if not isinstance(raw, list):
            logger.warning("Expected a list from %s, got %s", self.path, type(raw).__name__)
            return []
        records: list[ModelT] = []
        for item in raw:
            try:
                records.append(self.model.model_validate(item))  # type: ignore[arg-type]
            except ValidationError as exc:
                logger.warning("Skipping invalid %s record: %s", self.path, exc.errors()[:1])
        return records

    async def fetch_all(self) -> tuple[list[ModelT], FetchResult]:
        """Parsed records plus the raw result, so callers can tell live from cached."""
        result = await self.api.fetch(self.path, [])
        return self._parse_all(result.value), result

    async def list_all(self) -> list[ModelT]:
        records, _ = await self.fetch_all()
        return records

    async def get(self, record_id: RecordId) -> Optional[ModelT]:
        for record in await self.list_all():
            if str(record.id) == str(record_id):  # type: ignore[attr-defined]
                return record
        return None

    async def add(self, record: ModelT) -> Any:
        payload = record.to_wire(exclude={"id"}, exclude_none=True)
        return await self.api.create(self.path, payload)

    async def update(self, record_id: RecordId, patch: dict[str, Any]) -> Any:
        return await self.api.update(f"{self.path}/{record_id}", patch)

    async def remove(self, record_id: RecordId) -> Any:
        return await self.api.delete(f"{self.path}/{record_id}")


class PlanRepository(CollectionRepository[Plan]):
    path = "/plans"
    model = Plan

    async def save(self, plan: Plan) -> Any:
        """Create the plan, or replace its fields when it already has an id."""
        if plan.id is None:
            return await self.add(plan)
        return await self.update(plan.id, plan.to_wire(exclude={"id"}))


class BookingRepository(CollectionRepository[Booking]):
    path = "/bookings"
    model = Booking

    async def set_status(self, record_id: RecordId, status: Union[BookingStatus, str]) -> Any:
        """Move a booking to Approved or Rejected.

        Leaving a decided booking is allowed but logged.

        Raises:
            ValueError: If ``status`` is not a known booking status.
        """
        status = BookingStatus(status)
        current = await self.get(record_id)
        if current is not None and not current.is_pending and current.status != status:
            logger.warning(
                "Booking %s moved from %s to %s", record_id, current.status.value, status.value
            )
        return await self.update(record_id, {"status": status.value})

    async def approve(self, record_id: RecordId) -> Any:
        return await self.set_status(record_id, BookingStatus.APPROVED)

    async def reject(self, record_id: RecordId) -> Any:
        return await self.set_status(record_id, BookingStatus.REJECTED)


class MessageRepository(CollectionRepository[Message]):
    path = "/messages"
    model = Message


class OfferRepository(CollectionRepository[Offer]):
    path = "/offers"
    model = Offer

    async def set_active(self, record_id: RecordId, is_active: bool) -> Any:
        return await self.update(record_id, {"isActive": is_active})

    async def toggle(self, offer: Offer) -> Any:
        return await self.set_active(offer.id, not offer.is_active)  # type: ignore[arg-type]


class SettingsRepository:
    """The settings singleton: read and whole-record replace, never delete."""

    path = SETTINGS_PATH

    def __init__(self, api: DataApi) -> None:
        self.api = api

    async def fetch(self) -> tuple[SiteSettings, FetchResult]:
        """Parsed settings plus the raw result, so callers can tell live from cached."""
        result = await self.api.fetch(self.path, {})
        raw = result.value
        if not raw:
            raw = get_default(self.path)
        try:
            return SiteSettings.model_validate(raw), result
        except ValidationError as exc:
            logger.warning("Invalid settings record, using defaults: %s", exc.errors()[:1])
            return SiteSettings.model_validate(get_default(self.path)), result

    async def load(self) -> SiteSettings:
        site_settings, _ = await self.fetch()
        return site_settings

    async def save(self, site_settings: SiteSettings) -> Any:
        return await self.api.update(self.path, site_settings.to_wire(exclude_none=True))


class Repositories:
    """All repositories bound to one DataApi."""

    def __init__(self, api: DataApi) -> None:
        self.api = api
        self.plans = PlanRepository(api)
        self.bookings = BookingRepository(api)
        self.messages = MessageRepository(api)
        self.offers = OfferRepository(api)
        self.settings = SettingsRepository(api)
