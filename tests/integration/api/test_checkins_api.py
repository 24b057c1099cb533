from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select

from src.domain.entities import Checkin

API = "/api"


@pytest.mark.asyncio
async def test_qr_scan_twice_records_one_checkin(
    client: AsyncClient, db_session, auth_headers, seeded, operator_id
):
    qr = await client.get(f"{API}/guests/{seeded.adult_id}/qr", headers=auth_headers)
    assert qr.status_code == 200, qr.text
    qr_content = qr.json()["qr_content"]
    assert qr_content.startswith("dmc-checkin:")

    body = {"code": qr_content, "event_id": str(seeded.event_id), "device_id": "gate-1"}

    first = await client.post(f"{API}/checkins/scan", json=body, headers=auth_headers)
    assert first.status_code == 201, first.text
    first_data = first.json()
    assert first_data["created"] is True
    assert first_data["duplicate"] is False
    assert first_data["checkin"]["method"] == "qr"
    assert first_data["checkin"]["operator_id"] == str(operator_id)
    assert first_data["guest"]["id"] == str(seeded.adult_id)
    assert first_data["event"]["name"] == "Ceremony"

    second = await client.post(f"{API}/checkins/scan", json=body, headers=auth_headers)
    assert second.status_code == 201
    second_data = second.json()
    assert second_data["created"] is False
    assert second_data["duplicate"] is True
    assert second_data["checkin"]["id"] == first_data["checkin"]["id"]

    count = (
        await db_session.execute(
            select(func.count(Checkin.id)).where(Checkin.guest_id == seeded.adult_id)
        )
    ).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_bare_token_is_accepted(client: AsyncClient, auth_headers, seeded):
    qr = await client.get(f"{API}/guests/{seeded.child_id}/qr", headers=auth_headers)

    response = await client.post(
        f"{API}/checkins/scan", json={"code": qr.json()["token"]}, headers=auth_headers
    )

    assert response.status_code == 201, response.text
    assert response.json()["guest"]["id"] == str(seeded.child_id)
    assert response.json()["event"] is None


@pytest.mark.asyncio
async def test_scan_garbage_code(client: AsyncClient, auth_headers, seeded):
    response = await client.post(
        f"{API}/checkins/scan", json={"code": "dmc-checkin:not-a-token"}, headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_CODE"


@pytest.mark.asyncio
async def test_manual_checkin_and_listing(client: AsyncClient, auth_headers, seeded):
    manual = await client.post(
        f"{API}/checkins",
        json={"guest_id": str(seeded.child_id), "event_id": str(seeded.event_id), "notes": "late"},
        headers=auth_headers,
    )
    assert manual.status_code == 201, manual.text
    assert manual.json()["checkin"]["method"] == "manual"

    repeat = await client.post(
        f"{API}/checkins",
        json={"guest_id": str(seeded.child_id), "event_id": str(seeded.event_id)},
        headers=auth_headers,
    )
    assert repeat.json()["duplicate"] is True

    response = await client.get(
        f"{API}/checkins", params={"event_id": str(seeded.event_id)}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 1
    assert data["items"][0]["guest"]["name"] == "Tiago Oliveira"
    assert data["items"][0]["notes"] == "late"
    summary = data["summary"]
    assert summary["total_checkins"] == 1
    assert summary["unique_checked_in_guests"] == 1
    assert summary["checkins_today"] == 1
    assert summary["duplicates_ignored_24h"] == 1
    assert summary["by_method"] == [{"method": "manual", "total": 1}]


@pytest.mark.asyncio
async def test_list_search_filters_by_guest(client: AsyncClient, auth_headers, seeded):
    for guest_id in (seeded.adult_id, seeded.child_id):
        await client.post(f"{API}/checkins", json={"guest_id": str(guest_id)}, headers=auth_headers)

    response = await client.get(
        f"{API}/checkins", params={"search": "marta"}, headers=auth_headers
    )

    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["guest"]["id"] for item in items] == [str(seeded.adult_id)]


@pytest.mark.asyncio
async def test_checkin_rejections(client: AsyncClient, auth_headers, seeded):
    unknown_guest = await client.post(
        f"{API}/checkins", json={"guest_id": str(uuid4())}, headers=auth_headers
    )
    assert unknown_guest.status_code == 404
    assert unknown_guest.json()["error"]["code"] == "GUEST_NOT_FOUND"

    bad_method = await client.post(
        f"{API}/checkins",
        json={"guest_id": str(seeded.adult_id), "method": "facial"},
        headers=auth_headers,
    )
    assert bad_method.status_code == 422
    assert bad_method.json()["error"]["code"] == "INVALID_METHOD"


@pytest.mark.asyncio
async def test_inactive_event_rejects_new_checkins(client: AsyncClient, auth_headers, seeded):
    await client.patch(
        f"{API}/events/{seeded.event_id}", json={"is_active": False}, headers=auth_headers
    )

    response = await client.post(
        f"{API}/checkins",
        json={"guest_id": str(seeded.adult_id), "event_id": str(seeded.event_id)},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "EVENT_INACTIVE"
