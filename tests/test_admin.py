"""Tests for dashboard aggregation and admin helpers."""

import httpx
import pytest

from kingplay.admin import (
    AdminStats,
    active_offers,
    compute_stats,
    load_dashboard,
    parse_features,
    toggle_disclaimer_page,
)
from kingplay.api.accessor import DataSource
from kingplay.repositories import Repositories
from kingplay.schemas.booking_schema import Booking, BookingStatus
from kingplay.schemas.offer_schema import Offer
from kingplay.schemas.settings_schema import SiteSettings
from tests.conftest import make_api


def _booking(status: BookingStatus) -> Booking:
    return Booking(customer_name="A", phone="1", email="a@x.com", status=status)


class TestStats:
    def test_counts(self):
        stats = compute_stats(
            [_booking(BookingStatus.PENDING), _booking(BookingStatus.APPROVED), _booking(BookingStatus.PENDING)],
            [],
            [],
        )
        assert stats == AdminStats(total_bookings=3, pending_bookings=2, messages=0, active_plans=0)

    def test_empty(self):
        assert compute_stats([], [], []) == AdminStats()


class TestLoadDashboard:
    @pytest.mark.asyncio
    async def test_offline_dashboard_uses_local_data(self, offline_repos, offline_api):
        await offline_api.create("/messages", {"name": "A", "email": "a@x.com", "message": "hi"})
        snapshot = await load_dashboard(offline_repos)
        assert not snapshot.is_live
        assert snapshot.sources["messages"] == DataSource.MIRROR
        assert snapshot.sources["plans"] == DataSource.DEFAULT
        assert snapshot.sources["settings"] == DataSource.DEFAULT
        assert snapshot.stats.messages == 1
        assert snapshot.stats.active_plans == 3
        assert snapshot.settings.site_title == "The King Play Elite"

    @pytest.mark.asyncio
    async def test_online_dashboard_is_live(self, online_repos, online_api):
        await online_api.create("/bookings", {"customerName": "A", "phone": "1", "email": "a@x.com"})
        snapshot = await load_dashboard(online_repos)
        assert snapshot.is_live
        assert snapshot.sources["settings"] == DataSource.REMOTE
        assert snapshot.stats.total_bookings == 1
        assert snapshot.stats.pending_bookings == 1
        assert snapshot.stats.active_plans == 2

    @pytest.mark.asyncio
    async def test_local_settings_mark_dashboard_not_live(self, fake_server):
        def handler(request):
            if request.url.path == "/api/settings":
                return httpx.Response(503, json={"error": "down"})
            return fake_server.handler(request)

        repos = Repositories(make_api(httpx.MockTransport(handler)))
        snapshot = await load_dashboard(repos)
        assert snapshot.sources["plans"] == DataSource.REMOTE
        assert snapshot.sources["settings"] == DataSource.DEFAULT
        assert not snapshot.is_live

    @pytest.mark.asyncio
    async def test_reads_in_dashboard_order(self, online_repos, fake_server):
        await load_dashboard(online_repos)
        paths = [path for _, path in fake_server.requests]
        assert paths == ["/api/bookings", "/api/messages", "/api/plans", "/api/offers", "/api/settings"]


class TestHelpers:
    def test_parse_features(self):
        assert parse_features(" Dinner Companion,Event Partner , ,") == ["Dinner Companion", "Event Partner"]

    def test_parse_features_empty(self):
        assert parse_features("") == []

    def test_toggle_adds_page(self):
        site = SiteSettings(disclaimer_pages=["/"])
        assert toggle_disclaimer_page(site, "/plans").disclaimer_pages == ["/", "/plans"]

    def test_toggle_removes_page(self):
        site = SiteSettings(disclaimer_pages=["/", "/plans"])
        updated = toggle_disclaimer_page(site, "/")
        assert updated.disclaimer_pages == ["/plans"]
        assert site.disclaimer_pages == ["/", "/plans"]

    def test_active_offers(self):
        offers = [Offer(id=1, title="On"), Offer(id=2, title="Off", is_active=False)]
        assert [o.id for o in active_offers(offers)] == [1]
