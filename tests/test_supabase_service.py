import json

import httpx
import pytest

from catalog.library import Library
from catalog.services.supabase_service import (
    SupabaseClient,
    SupabaseError,
    SupabaseRequestError,
)
from catalog.views import FETCH_ERROR_MESSAGE, HomeView
from config import ConfigurationError, Settings


def _client(handler):
    return SupabaseClient("https://demo.supabase.co/", "anon-key", transport=httpx.MockTransport(handler))


async def test_select_all_sends_auth_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json=[{"id": 1, "title": "Dune"}])

    async with _client(handler) as client:
        rows = await client.table("books").select()

    request = seen["request"]
    assert rows == [{"id": 1, "title": "Dune"}]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/books"
    assert request.url.params["select"] == "*"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"


async def test_select_one_filters_by_id():
    def handler(request):
        assert request.url.params["id"] == "eq.5"
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        assert await client.table("books").select_one(5) is None


async def test_insert_asks_for_representation():
    def handler(request):
        assert request.method == "POST"
        assert request.headers["Prefer"] == "return=representation"
        body = json.loads(request.content)
        assert body == [{"title": "Dune"}]
        return httpx.Response(201, json=[{"id": 9, "title": "Dune"}])

    async with _client(handler) as client:
        rows = await client.table("books").insert([{"title": "Dune"}])
    assert rows == [{"id": 9, "title": "Dune"}]


async def test_update_and_delete_are_keyed_by_id():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.params["id"]))
        return httpx.Response(200, json=[{"id": 3}])

    async with _client(handler) as client:
        table = client.table("books")
        await table.update({"title": "New"}, id=3)
        await table.delete(id=3)

    assert calls == [("PATCH", "eq.3"), ("DELETE", "eq.3")]


async def test_empty_body_returns_empty_list():
    async with _client(lambda request: httpx.Response(204)) as client:
        assert await client.table("books").delete(id=1) == []


async def test_error_body_is_parsed():
    def handler(request):
        return httpx.Response(401, json={
            "message": "permission denied for table books",
            "code": "42501",
            "details": None,
            "hint": None,
        })

    async with _client(handler) as client:
        with pytest.raises(SupabaseError) as excinfo:
            await client.table("books").select()

    assert excinfo.value.message == "permission denied for table books"
    assert excinfo.value.status_code == 401
    assert excinfo.value.code == "42501"


async def test_non_json_error_uses_text():
    async with _client(lambda request: httpx.Response(503, text="upstream unavailable")) as client:
        with pytest.raises(SupabaseError, match="upstream unavailable"):
            await client.table("books").select()


async def test_transport_failure_raises_request_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(SupabaseRequestError):
            await client.table("books").select()


async def test_ping_reports_failure_without_raising():
    async with _client(lambda request: httpx.Response(500, json={"message": "boom"})) as client:
        assert await client.table("books").ping() is False
    async with _client(lambda request: httpx.Response(200, json=[])) as client:
        assert await client.table("books").ping() is True


def test_from_settings_requires_url_and_key():
    with pytest.raises(ConfigurationError):
        SupabaseClient.from_settings(Settings(supabase_url=None, supabase_anon_key="key"))
    with pytest.raises(ConfigurationError):
        SupabaseClient.from_settings(Settings(supabase_url="https://demo.supabase.co", supabase_anon_key=""))


async def test_non_json_success_body_raises_supabase_error():
    # e.g. a proxy or captive portal answering 200 with an HTML page
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(SupabaseError, match="Invalid JSON in response") as excinfo:
            await client.table("books").select()
    assert excinfo.value.status_code == 200

    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        view = HomeView(Library(client.table("books")))
        await view.load()
    assert view.books is None
    assert view.fetch_error == FETCH_ERROR_MESSAGE


async def test_malformed_id_is_reported_as_invalid_input():
    def handler(request):
        return httpx.Response(400, json={
            "message": 'invalid input syntax for type bigint: "abc"',
            "code": "22P02",
            "details": None,
            "hint": None,
        })

    async with _client(handler) as client:
        with pytest.raises(SupabaseError) as excinfo:
            await client.table("books").select_one("abc")
    assert excinfo.value.is_invalid_input
    assert not SupabaseError("permission denied for table books", status_code=401, code="42501").is_invalid_input
