"""
Tests for admin endpoints: access control, event management, stats.
"""

from datetime import timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import event as sa_event, func, select

from eventhub.models import Event
from eventhub.schemas.event import EventCreate
from eventhub.services.event_service import create_event

from conftest import future, make_event


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Admin Launch Party",
        "description": "Created from the dashboard",
        "location": "Berlin",
        "venue_name": "Hall 1",
        "start_date": future(14).isoformat(),
        "price": "19.99",
        "total_seats": 200,
        "featured": True,
        "tags": ["party", "launch", "party"],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_admin_routes_require_authentication(client: AsyncClient):
    response = await client.get("/api/v1/admin/stats")
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("GET", "/api/v1/admin/events"),
    ("GET", "/api/v1/admin/stats"),
    ("DELETE", "/api/v1/admin/events/some-id"),
])
async def test_non_admin_is_forbidden(client: AsyncClient, auth_headers, method, path):
    response = await client.request(method, path, headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"


@pytest.mark.asyncio
async def test_non_admin_cannot_create_event(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/admin/events", json=event_payload(), headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, admin_headers, admin_user, music):
    response = await client.post(
        "/api/v1/admin/events",
        json=event_payload(category_id=music.id),
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Admin Launch Party"
    assert data["price"] == "19.99"
    assert data["total_seats"] == 200
    assert data["available_seats"] == 200
    assert data["status"] == "upcoming"
    assert data["tags"] == ["party", "launch"]
    assert data["organizer_id"] == admin_user.id
    assert data["category"]["name"] == "Music"

    listing = await client.get("/api/v1/events/")
    assert [e["id"] for e in listing.json()["events"]] == [data["id"]]


@pytest.mark.asyncio
async def test_create_event_in_the_past(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/admin/events",
        json=event_payload(start_date=future(-1).isoformat()),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


@pytest.mark.asyncio
async def test_create_event_end_before_start(client: AsyncClient, admin_headers):
    start = future(10)
    response = await client.post(
        "/api/v1/admin/events",
        json=event_payload(
            start_date=start.isoformat(),
            end_date=(start - timedelta(hours=2)).isoformat(),
        ),
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"total_seats": 0},
    {"price": "-1.00"},
    {"price": "10.001"},
    {"title": ""},
])
async def test_create_event_validation(client: AsyncClient, admin_headers, overrides):
    response = await client.post(
        "/api/v1/admin/events", json=event_payload(**overrides), headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_all_events_includes_every_status(client: AsyncClient, admin_headers, db_session):
    upcoming = await make_event(db_session, title="Upcoming")
    past = await make_event(db_session, title="Past", status="past")
    cancelled = await make_event(db_session, title="Cancelled", status="cancelled")

    response = await client.get("/api/v1/admin/events", headers=admin_headers)
    assert response.status_code == 200
    assert {e["id"] for e in response.json()} == {upcoming.id, past.id, cancelled.id}


@pytest.mark.asyncio
async def test_delete_event_removes_bookings(client: AsyncClient, admin_headers, auth_headers, test_event):
    booking = await client.post(
        "/api/v1/bookings/",
        json={"event_id": test_event.id, "tickets_count": 2},
        headers=auth_headers,
    )
    assert booking.status_code == 201

    response = await client.delete(f"/api/v1/admin/events/{test_event.id}", headers=admin_headers)
    assert response.status_code == 204

    assert (await client.get(f"/api/v1/events/{test_event.id}")).status_code == 404
    assert (await client.get("/api/v1/bookings/", headers=auth_headers)).json() == []


@pytest.mark.asyncio
async def test_delete_missing_event(client: AsyncClient, admin_headers):
    response = await client.delete("/api/v1/admin/events/missing", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "EVENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_stats_count_confirmed_revenue_only(client: AsyncClient, admin_headers, auth_headers, test_event):
    kept = await client.post(
        "/api/v1/bookings/",
        json={"event_id": test_event.id, "tickets_count": 3},
        headers=auth_headers,
    )
    dropped = await client.post(
        "/api/v1/bookings/",
        json={"event_id": test_event.id, "tickets_count": 1},
        headers=auth_headers,
    )
    assert kept.status_code == dropped.status_code == 201
    await client.delete(f"/api/v1/bookings/{dropped.json()['id']}", headers=auth_headers)

    response = await client.get("/api/v1/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_events": 1,
        "total_bookings": 2,
        "total_revenue": "75.00",
    }


@pytest.mark.asyncio
async def test_stats_empty(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/admin/stats", headers=admin_headers)
    assert response.json() == {"total_events": 0, "total_bookings": 0, "total_revenue": "0.00"}


@pytest.mark.asyncio
async def test_create_event_unknown_category(client: AsyncClient, admin_headers, db_session):
    response = await client.post(
        "/api/v1/admin/events",
        json=event_payload(category_id="does-not-exist"),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"

    count = (await db_session.execute(select(func.count()).select_from(Event))).scalar()
    assert count == 0


@pytest.mark.asyncio
async def test_create_event_stores_naive_end_date_as_utc(db_session, admin_user):
    """Naive datetimes are read as UTC for both start and end."""
    stored = {}

    def capture(mapper, connection, target):
        stored["start"] = target.start_date
        stored["end"] = target.end_date

    start = future(10).replace(tzinfo=None)
    data = EventCreate(
        title="Naive dates",
        start_date=start,
        end_date=start + timedelta(hours=3),
        total_seats=10,
    )

    sa_event.listen(Event, "before_insert", capture)
    try:
        await create_event(db_session, data, organizer_id=admin_user.id)
    finally:
        sa_event.remove(Event, "before_insert", capture)

    assert stored["start"].tzinfo == timezone.utc
    assert stored["end"].tzinfo == timezone.utc
    assert stored["end"] - stored["start"] == timedelta(hours=3)
