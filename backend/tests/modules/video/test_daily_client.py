"""Tests for DailyClient using httpx.MockTransport."""

import json

import httpx
import pytest

from modules.video.client import DailyClient
from shared.exceptions import ExternalServiceError

BASE_URL = "https://api.daily.test/v1"


def make_client(handler, api_key: str = "daily-key") -> DailyClient:
    return DailyClient(api_key=api_key, base_url=BASE_URL, transport=httpx.MockTransport(handler))


def room_json(name: str) -> dict:
    return {"id": "r-1", "name": name, "url": f"https://pawzr.daily.co/{name}"}


class TestCreateRoom:
    @pytest.mark.asyncio
    async def test_creates_room(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=room_json("pawzr-b1"))

        room = await make_client(handler).create_room("pawzr-b1")

        assert room.url == "https://pawzr.daily.co/pawzr-b1"
        request = seen[0]
        assert request.method == "POST"
        assert request.url == f"{BASE_URL}/rooms"
        assert request.headers["authorization"] == "Bearer daily-key"
        body = json.loads(request.content)
        assert body["name"] == "pawzr-b1"
        assert body["properties"]["max_participants"] == 2
        assert body["properties"]["enable_chat"] is True

    @pytest.mark.asyncio
    async def test_name_conflict_reuses_existing_room(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(400, json={"error": "invalid-request-error", "info": "a room named pawzr-b1 already exists"})
            assert request.url.path.endswith("/rooms/pawzr-b1")
            return httpx.Response(200, json=room_json("pawzr-b1"))

        room = await make_client(handler).create_room("pawzr-b1")

        assert room.name == "pawzr-b1"

    @pytest.mark.asyncio
    async def test_rejection_without_existing_room(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(400, json={"error": "invalid-request-error"})
            return httpx.Response(404, json={"error": "not-found"})

        with pytest.raises(ExternalServiceError) as exc_info:
            await make_client(handler).create_room("pawzr-b1")
        assert exc_info.value.details["service"] == "daily"

    @pytest.mark.asyncio
    async def test_server_error(self):
        with pytest.raises(ExternalServiceError) as exc_info:
            await make_client(lambda request: httpx.Response(500, text="oops")).create_room("pawzr-b1")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            await make_client(handler).create_room("pawzr-b1")
        assert exc_info.value.message == "Video provider timed out"

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExternalServiceError):
            await make_client(handler).create_room("pawzr-b1")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        with pytest.raises(ExternalServiceError):
            await make_client(lambda request: httpx.Response(200, json={"id": "r-1"})).create_room("pawzr-b1")

    @pytest.mark.asyncio
    async def test_not_configured(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        client = make_client(handler, api_key="")

        assert not client.is_configured
        with pytest.raises(ExternalServiceError):
            await client.create_room("pawzr-b1")


class TestGetRoom:
    @pytest.mark.asyncio
    async def test_missing_room(self):
        assert await make_client(lambda request: httpx.Response(404)).get_room("pawzr-b1") is None

    @pytest.mark.asyncio
    async def test_existing_room(self):
        room = await make_client(lambda request: httpx.Response(200, json=room_json("pawzr-b1"))).get_room("pawzr-b1")

        assert room.url.endswith("/pawzr-b1")
