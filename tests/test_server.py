"""Tests for the HTTP webhook endpoint."""

from __future__ import annotations

import pytest
from aiohttp.test_utils import TestClient, TestServer

from karma import BackendRegistry, KarmaConfig
from karma.server import create_app
from tests.conftest import FailingBackend


@pytest.fixture
async def client(config, registry):
    async with TestClient(TestServer(create_app(config, registry))) as c:
        yield c


def _form(text: str, token: str = "secret", trigger: str = "karma") -> dict[str, str]:
    return {"token": token, "trigger_word": trigger, "text": text}


class TestHandler:
    async def test_increase(self, client, backend):
        resp = await client.post("/", data=_form("karma alice++"))
        assert resp.status == 200
        assert await resp.json() == {"text": "alice = 1"}
        assert await backend.get("alice") == 1

    async def test_query(self, client, backend):
        await backend.increase("eve", 3)
        resp = await client.post("/", data=_form("karma Eve"))
        assert await resp.json() == {"text": "eve = 3"}

    async def test_get_with_query_string(self, client):
        resp = await client.get("/", params=_form("karma bob--"))
        assert resp.status == 200
        assert await resp.json() == {"text": "bob = -1"}

    async def test_invalid_token(self, client, backend):
        resp = await client.post("/", data=_form("karma alice++", token="wrong"))
        assert resp.status == 403
        assert await backend.get("alice") == 0

    async def test_missing_token(self, client):
        resp = await client.post("/", data={"trigger_word": "karma", "text": "karma alice++"})
        assert resp.status == 403

    async def test_other_trigger_is_ignored(self, client, backend):
        resp = await client.post("/", data=_form("beer alice++", trigger="beer"))
        assert resp.status == 200
        assert await resp.text() == ""
        assert await backend.get("alice") == 0

    async def test_missing_phrase(self, client):
        resp = await client.post("/", data=_form("karma"))
        assert resp.status == 200
        body = await resp.json()
        assert "Cannot find the user" in body["text"]

    async def test_malformed_amount_reports_balance(self, client, backend):
        await backend.increase("dave", 2)
        resp = await client.post("/", data=_form("karma dave+=lots"))
        assert await resp.json() == {"text": "dave = 2"}

    async def test_phrase_without_letters(self, client, backend):
        resp = await client.post("/", data=_form("karma ++"))
        assert resp.status == 200
        assert "Cannot find the user" in (await resp.json())["text"]
        assert backend._counters == {}


class TestHandlerConfig:
    async def test_strict_amounts(self, registry):
        config = KarmaConfig(token="secret", strict_amounts=True)
        async with TestClient(TestServer(create_app(config, registry))) as client:
            resp = await client.post("/", data=_form("karma dave+=lots"))
            body = await resp.json()
        assert "Cannot read an amount" in body["text"]

    async def test_unknown_storage(self, registry):
        config = KarmaConfig(token="secret", storage="dynamodb")
        async with TestClient(TestServer(create_app(config, registry))) as client:
            resp = await client.post("/", data=_form("karma alice++"))
            assert resp.status == 503

    async def test_backend_failure(self):
        registry = BackendRegistry()
        registry.register("remote", FailingBackend)
        config = KarmaConfig(token="secret", storage="remote")
        async with TestClient(TestServer(create_app(config, registry))) as client:
            resp = await client.post("/", data=_form("karma alice"))
            assert resp.status == 503
            # The process keeps serving after a failed request.
            resp = await client.post("/", data=_form("karma alice"))
            assert resp.status == 503

    async def test_default_registry_used_when_omitted(self):
        config = KarmaConfig(token="secret")
        async with TestClient(TestServer(create_app(config))) as client:
            await client.post("/", data=_form("karma alice+=2"))
            resp = await client.post("/", data=_form("karma alice"))
            assert await resp.json() == {"text": "alice = 2"}
