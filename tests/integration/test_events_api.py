"""HTTP tests for the events, notifications and reminders routers."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

from httpx import ASGITransport, AsyncClient
import pytest

from agenda_service.infra.metrics import REGISTRY

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


def _iso(ts: datetime) -> str:
    return ts.isoformat()


def _requests(labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value("http_requests_total", labels) or 0.0


async def _create(client: AsyncClient, **body) -> dict:
    body.setdefault("title", "Event")
    body.setdefault("scheduled_time", _iso(NOW))
    response = await client.post("/api/events", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestCrud:
    async def test_create_and_get(self, client: AsyncClient):
        created = await _create(client, title="Dentist", description="checkup", priority="high")

        assert created["title"] == "Dentist"
        assert created["priority"] == "high"
        assert created["completed"] is False
        assert created["notified"] is False

        response = await client.get(f"/api/events/{created['id']}")
        assert response.status_code == 200
        assert response.json()["description"] == "checkup"
        assert datetime.fromisoformat(response.json()["scheduled_time"]) == NOW

    async def test_list_is_ordered(self, client: AsyncClient):
        await _create(client, title="late", scheduled_time=_iso(NOW + timedelta(hours=1)))
        await _create(client, title="early", scheduled_time=_iso(NOW - timedelta(hours=1)))

        response = await client.get("/api/events")

        assert [e["title"] for e in response.json()] == ["early", "late"]

    async def test_missing_title_is_422_problem(self, client: AsyncClient):
        response = await client.post("/api/events", json={"scheduled_time": _iso(NOW)})

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation-error"
        assert body["status"] == 422
        assert any(err["field"].endswith("title") for err in body["errors"])

    async def test_not_found_is_404_problem(self, client: AsyncClient):
        response = await client.get("/api/events/999")

        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "event-not-found"
        assert body["event_id"] == 999

    async def test_put_priority_only(self, client: AsyncClient):
        created = await _create(client, title="Review", description="q1")

        response = await client.put(f"/api/events/{created['id']}", json={"priority": "low"})

        assert response.status_code == 200
        body = response.json()
        assert body["priority"] == "low"
        assert body["title"] == "Review"
        assert body["description"] == "q1"
        assert body["scheduled_time"] == created["scheduled_time"]

    async def test_complete_then_reopen_conflicts(self, client: AsyncClient):
        created = await _create(client)

        done = await client.post(f"/api/events/{created['id']}/complete")
        assert done.status_code == 200
        assert done.json()["completed"] is True

        reopen = await client.put(f"/api/events/{created['id']}", json={"completed": False})
        assert reopen.status_code == 409
        assert reopen.json()["type"] == "event-completed"

        again = await client.get(f"/api/events/{created['id']}")
        assert again.json()["completed"] is True

    async def test_delete(self, client: AsyncClient):
        created = await _create(client)

        response = await client.delete(f"/api/events/{created['id']}")
        assert response.status_code == 204

        assert (await client.get(f"/api/events/{created['id']}")).status_code == 404
        assert (await client.delete(f"/api/events/{created['id']}")).status_code == 404


class TestFeeds:
    async def test_today_and_pending(self, client: AsyncClient):
        await _create(client, title="earlier", scheduled_time=_iso(NOW - timedelta(hours=2)))
        await _create(client, title="tomorrow", scheduled_time=_iso(NOW + timedelta(days=1)))

        today = await client.get("/api/events/today")
        pending = await client.get("/api/events/pending")

        assert [e["title"] for e in today.json()] == ["earlier"]
        assert [e["title"] for e in pending.json()] == ["tomorrow"]

    async def test_display_feed(self, client: AsyncClient):
        for i in range(11):
            await _create(
                client,
                title="A very long meeting title that keeps going",
                scheduled_time=_iso(NOW + timedelta(minutes=5 * i)),
                priority="normal",
            )

        response = await client.get("/api/events/display")

        body = response.json()
        assert body["count"] == 10
        assert body["events"][0] == {"t": "A very long meeting title that", "h": "09:00", "p": "N"}

    async def test_notifications(self, client: AsyncClient):
        await _create(client, title="Standup", scheduled_time=_iso(NOW + timedelta(minutes=15)))
        await _create(client, title="Far", scheduled_time=_iso(NOW + timedelta(minutes=31)))

        response = await client.get("/api/notifications")

        body = response.json()
        assert body["count"] == 1
        assert body["notifications"][0]["title"] == "Standup"
        assert body["notifications"][0]["minutes_remaining"] == 15


class TestServiceSurface:
    async def test_root_banner(self, client: AsyncClient):
        response = await client.get("/")

        body = response.json()
        assert response.status_code == 200
        assert body["version"] == "2.0.0"
        assert "events" in body["features"]
        assert body["database"] == {"ready": True}

    async def test_reminder_status_without_scheduler(self, client: AsyncClient):
        response = await client.get("/api/reminders/status")

        assert response.status_code == 200
        assert response.json()["running"] is False

    async def test_metrics_exposition(self, client: AsyncClient):
        await client.get("/api/events")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    async def test_request_counter_uses_full_route_template(self, client: AsyncClient):
        listed = {"method": "GET", "endpoint": "/api/events", "status": "200"}
        missing = {"method": "GET", "endpoint": "/api/events/{event_id}", "status": "404"}
        listed_before = _requests(listed)
        missing_before = _requests(missing)

        await client.get("/api/events")
        await client.get("/api/events/999")

        assert _requests(listed) - listed_before == 1
        assert _requests(missing) - missing_before == 1

    async def test_cors_headers(self, client: AsyncClient):
        response = await client.get("/api/events", headers={"Origin": "http://display.local"})

        assert "access-control-allow-origin" in response.headers


@pytest.fixture
async def degraded_client() -> AsyncGenerator[AsyncClient]:
    from agenda_service.app.main import create_app

    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestDegraded:
    async def test_storage_endpoints_answer_503(self, degraded_client: AsyncClient):
        response = await degraded_client.get("/api/events")

        assert response.status_code == 503
        body = response.json()
        assert body["type"] == "service-unavailable"
        assert body["service"] == "database"

    async def test_root_reports_database_not_ready(self, degraded_client: AsyncClient):
        response = await degraded_client.get("/")

        assert response.json()["database"] == {"ready": False}
