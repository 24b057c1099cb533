from uuid import uuid4

import pytest
from httpx import AsyncClient

API = "/api"


@pytest.mark.asyncio
async def test_create_event_normalizes_questions(client: AsyncClient, auth_headers, seeded):
    response = await client.post(
        f"{API}/events",
        json={
            "name": "Welcome Dinner",
            "questions": [
                {"label": "Menu choice", "type": "select", "options": ["Fish", "Veggie"]},
                {"label": "Song request"},
            ],
        },
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["slug"] == "welcome-dinner"
    assert data["is_active"] is True
    assert [q["type"] for q in data["questions"]] == ["select", "text"]
    assert all(q["key"] for q in data["questions"])


@pytest.mark.asyncio
async def test_create_event_without_name(client: AsyncClient, auth_headers, seeded):
    response = await client.post(f"{API}/events", json={"slug": "nameless"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_EVENT_DATA"


@pytest.mark.asyncio
async def test_update_and_history(client: AsyncClient, auth_headers, seeded):
    patch = await client.patch(
        f"{API}/events/{seeded.event_id}",
        json={"name": "Ceremony & Vows", "questions": [{"label": "Bringing a gift?"}]},
        headers=auth_headers,
    )
    assert patch.status_code == 200, patch.text
    assert patch.json()["name"] == "Ceremony & Vows"

    response = await client.get(f"{API}/events/{seeded.event_id}/history", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["event_id"] == str(seeded.event_id)
    assert len(data["events"]) == 1
    assert data["events"][0]["title"] == "Event updated"
    assert "Fields: name, questions" in data["text"]
    assert "Questions: 0 -> 1" in data["text"]


@pytest.mark.asyncio
async def test_history_of_untouched_event(client: AsyncClient, auth_headers, seeded):
    response = await client.get(f"{API}/events/{seeded.event_id}/history", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["events"] == []
    assert response.json()["text"] == "No history found for this event."


@pytest.mark.asyncio
async def test_update_unknown_event(client: AsyncClient, auth_headers, seeded):
    response = await client.patch(
        f"{API}/events/{uuid4()}", json={"name": "Ghost"}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "EVENT_NOT_FOUND"
