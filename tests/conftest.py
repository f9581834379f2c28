"""Shared test fixtures and helpers."""

import json
from datetime import date
from typing import Any, Optional

import httpx
import pytest

from kingplay.api.accessor import DataApi
from kingplay.api.remote import RemoteClient
from kingplay.forms import BookingForm
from kingplay.repositories import Repositories
from kingplay.store.mirror import MemoryStorage, MirrorStore

BASE_URL = "http://api.test/api"


class FakeServer:
    """
    In-memory stand-in for the spreadsheet-backed API.

    Mirrors the real server's contract: collection GETs are newest-first,
    POST stamps id/created_at (and status on bookings), PUT on settings
    replaces the record, list/bool cells are stored JSON-encoded.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            "plans": [
                {"id": 1, "name": "The Twilight Spark", "price": "₹2,999", "duration": "2 Hours",
                 "features": json.dumps(["Stimulating Conversation"]), "isPopular": "false"},
                {"id": 2, "name": "Moonlight Romance", "price": "₹5,999", "duration": "5 Hours",
                 "features": json.dumps(["Dinner Partner", "Chauffeur Driven"]), "isPopular": "true"},
            ],
            "bookings": [],
            "messages": [],
            "offers": [
                {"id": 1, "title": "Launch Offer", "description": "Now live", "isActive": "true"},
            ],
        }
        self.settings: dict[str, Any] = {
            "id": 1,
            "siteTitle": "The King Play Elite",
            "disclaimerText": "Strictly 18+ Platonic Services Only.",
            "disclaimerPages": json.dumps(["/", "/booking"]),
            "ageGateEnabled": "true",
        }
        self.next_id = 1000
        self.requests: list[tuple[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        parts = [p for p in request.url.path.split("/") if p]
        if not parts:
            return httpx.Response(200, text="Backend is Running")
        if parts[0] != "api" or len(parts) < 2:
            return httpx.Response(404, json={"error": "Not found"})
        resource = parts[1]
        record_id = parts[2] if len(parts) > 2 else None
        body = json.loads(request.content) if request.content else None

        if resource == "settings":
            if request.method == "GET":
                return httpx.Response(200, json=self.settings)
            if request.method == "PUT":
                self.settings = {"id": 1, **body, "disclaimerPages": json.dumps(body.get("disclaimerPages"))}
                return httpx.Response(200, json={"message": "Settings saved"})
            return httpx.Response(405, json={"error": "Method not allowed"})

        if resource not in self.tables:
            return httpx.Response(404, json={"error": "Not found"})
        table = self.tables[resource]

        if request.method == "GET":
            return httpx.Response(200, json=list(reversed(table)))
        if request.method == "POST":
            self.next_id += 1
            record = {"id": self.next_id, **body, "created_at": "2025-03-15T10:00:00.000Z"}
            if resource == "bookings":
                record["status"] = "Pending"
            if resource == "plans":
                record["features"] = json.dumps(body.get("features", []))
            table.append(record)
            return httpx.Response(200, json={"message": "Created", "id": record["id"]})
        if request.method == "PUT":
            for item in table:
                if str(item["id"]) == str(record_id):
                    item.update(body)
                    return httpx.Response(200, json={"message": "Updated"})
            return httpx.Response(404, json={"error": "Not found"})
        if request.method == "DELETE":
            self.tables[resource] = [i for i in table if str(i["id"]) != str(record_id)]
            return httpx.Response(200, json={"message": "Deleted"})
        return httpx.Response(405, json={"error": "Method not allowed"})


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def make_api(
    transport: httpx.AsyncBaseTransport,
    mirror: Optional[MirrorStore] = None,
    cache_reads: bool = True,
    **kwargs: Any,
) -> DataApi:
    remote = RemoteClient(BASE_URL, timeout=1.0, transport=transport)
    return DataApi(remote, mirror or MirrorStore(MemoryStorage()), cache_reads=cache_reads, **kwargs)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def mirror(storage):
    return MirrorStore(storage)


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def offline_api(mirror):
    return make_api(httpx.MockTransport(_unreachable), mirror)


@pytest.fixture
def online_api(fake_server, mirror):
    return make_api(httpx.MockTransport(fake_server.handler), mirror)


@pytest.fixture
def offline_repos(offline_api):
    return Repositories(offline_api)


@pytest.fixture
def online_repos(online_api):
    return Repositories(online_api)


def status_transport(status_code: int, payload: Any = None) -> httpx.MockTransport:
    """Transport that answers every request with the same status."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload if payload is not None else {"error": "boom"})

    return httpx.MockTransport(handler)


def make_booking_form(**overrides: Any) -> BookingForm:
    """A fully valid booking form; override any field to break it."""
    values: dict[str, Any] = {
        "full_name": "Ananya R.",
        "phone": "98200 12345",
        "email": "ananya@example.com",
        "dob": "1990-06-15",
        "state": "Maharashtra",
        "city": "Mumbai",
        "address": "Taj Lands End, Bandra",
        "time": "19:30",
        "plan_id": "premium",
        "special_requirements": "Formal attire",
        "agreed_to_terms": True,
        "today": date(2025, 3, 15),
    }
    values.update(overrides)
    return BookingForm(**values)
