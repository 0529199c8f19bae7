from __future__ import annotations

import asyncio

import httpx

from fake_api import BASE_URL

from parish_admin.client import ParishApiClient
from parish_admin.client.shared import format_api_error


def _mock_client(handler) -> ParishApiClient:
    return ParishApiClient(BASE_URL, token="t", transport=httpx.MockTransport(handler))


def test_list_returns_envelope_and_data_key(make_client):
    async def scenario():
        async with make_client() as api:
            return await api.announcements.list()

    resp = asyncio.run(scenario())
    assert resp.success is True
    assert resp.status_code == 200
    ids = [a["id"] for a in resp.data_field("announcements")]
    assert ids == ["ann-1", "ann-2"]


def test_users_live_under_admin_prefix(make_client, fake_api):
    async def scenario():
        async with make_client() as api:
            return await api.users.list()

    resp = asyncio.run(scenario())
    assert resp.success
    assert ("GET", "/api/admin/users") in fake_api.calls


def test_bearer_token_is_sent_and_can_be_cleared(make_client, fake_api):
    async def scenario():
        async with make_client(token="abc123") as api:
            await api.health()
            api.set_token(None)
            await api.health()

    asyncio.run(scenario())
    assert fake_api.auth_headers == ["Bearer abc123", None]


def test_server_message_is_preferred_on_http_error(make_client, fake_api):
    fake_api.fail_resource("events", status=403, message="Insufficient permissions.")

    async def scenario():
        async with make_client() as api:
            return await api.events.list()

    resp = asyncio.run(scenario())
    assert resp.success is False
    assert resp.status_code == 403
    assert resp.error_message == "Insufficient permissions."


def test_http_error_without_message_reports_status(make_client, fake_api):
    fake_api.fail_resource("events", status=500, message=None)

    async def scenario():
        async with make_client() as api:
            return await api.events.list()

    resp = asyncio.run(scenario())
    assert resp.success is False
    assert resp.error_message == "HTTP error! status: 500"


def test_application_rejection_with_2xx(make_client, fake_api):
    fake_api.fail_resource("news", status=200, message="Validation failed")

    async def scenario():
        async with make_client() as api:
            return await api.news.list()

    resp = asyncio.run(scenario())
    assert resp.success is False
    assert resp.error_message == "Validation failed"


def test_rejection_without_message_falls_back_to_generic(make_client, fake_api):
    fake_api.fail_resource("news", status=200, message=None)

    async def scenario():
        async with make_client() as api:
            return await api.news.list()

    resp = asyncio.run(scenario())
    assert resp.error_message == "An error occurred"


def test_network_error_becomes_503():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with _mock_client(handler) as api:
            return await api.announcements.list()

    resp = asyncio.run(scenario())
    assert resp.success is False
    assert resp.status_code == 503
    assert resp.error_message.startswith("Network error contacting API")


def test_timeout_becomes_408():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async def scenario():
        async with _mock_client(handler) as api:
            return await api.announcements.list()

    resp = asyncio.run(scenario())
    assert resp.status_code == 408
    assert resp.error_message == "Request timed out contacting API."


def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    async def scenario():
        async with _mock_client(handler) as api:
            return await api.announcements.list()

    resp = asyncio.run(scenario())
    assert resp.success is False
    assert resp.error_message == "HTTP error! status: 502"


def test_reset_password_sends_both_key_spellings(make_client, fake_api):
    async def scenario():
        async with make_client() as api:
            return await api.users.reset_password("usr-2", "s3cret!")

    resp = asyncio.run(scenario())
    assert resp.success
    method, path, body = fake_api.bodies[-1]
    assert (method, path) == ("PATCH", "/api/admin/users/usr-2/reset-password")
    assert body == {"newPassword": "s3cret!", "password": "s3cret!"}


def test_bulk_schedule_put(make_client, fake_api):
    async def scenario():
        async with make_client() as api:
            return await api.schedule.bulk_update_day("sunday", [{"time": "08:00", "language": "english"}])

    resp = asyncio.run(scenario())
    assert resp.success
    method, path, body = fake_api.bodies[-1]
    assert (method, path) == ("PUT", "/api/schedule/day/sunday/bulk")
    assert body == {"schedule": [{"time": "08:00", "language": "english"}]}


def test_format_api_error_prefers_detail_then_status():
    assert format_api_error(404, "", {"detail": "Missing"}) == "Missing"
    assert format_api_error(404, "", {"message": "  "}) == "HTTP error! status: 404"
    assert format_api_error(0, "", None) == "An error occurred"
