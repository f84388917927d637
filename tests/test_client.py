import asyncio

import httpx

from newsdesk.client import POSTS_PATH, PostQuery, PostsClient, forwardable_headers

NEWS_QUERY = PostQuery(sort="New", limit=20, community_name="news")


async def _fetch(handler, query=NEWS_QUERY, **kwargs):
    async with PostsClient(
        "http://api.test/", transport=httpx.MockTransport(handler), **kwargs
    ) as client:
        return await client.get_posts(query)


def test_get_posts_success_and_query_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={"posts": [{"post": {"id": 1, "name": "Hello"}, "tags": []}]},
        )

    state = asyncio.run(_fetch(handler))

    assert state.is_success
    assert state.data.posts[0].name == "Hello"
    assert seen["path"] == POSTS_PATH
    assert seen["params"] == {"sort": "New", "limit": "20", "community_name": "news"}


def test_local_scope_query_params():
    query = PostQuery(sort="Top", limit=10, type_="Local")
    assert query.params() == {"sort": "Top", "limit": "10", "type_": "Local"}


def test_transport_error_message_kept_verbatim():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network timeout", request=request)

    state = asyncio.run(_fetch(handler))

    assert state.is_failed
    assert state.error.message == "network timeout"


def test_api_error_field_used_as_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "couldnt_find_community"})

    state = asyncio.run(_fetch(handler))
    assert state.error.message == "couldnt_find_community"


def test_http_status_without_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    state = asyncio.run(_fetch(handler))
    assert state.error.message == "HTTP 502"


def test_invalid_json_becomes_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    state = asyncio.run(_fetch(handler))
    assert state.is_failed


def test_forwarded_headers_reach_api():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, json={"posts": []})

    async def run():
        async with PostsClient.for_request(
            "http://api.test",
            {"Cookie": "jwt=abc", "Host": "landing.local", "Accept-Language": "de"},
            transport=httpx.MockTransport(handler),
        ) as client:
            return await client.get_posts(NEWS_QUERY)

    state = asyncio.run(run())

    assert state.is_success
    assert seen["cookie"] == "jwt=abc"
    assert seen["accept-language"] == "de"
    assert seen["host"] == "api.test"


def test_forwardable_headers_filters_hop_headers():
    assert forwardable_headers({"Connection": "keep-alive", "Authorization": "Bearer x"}) == {
        "authorization": "Bearer x"
    }
    assert forwardable_headers(None) == {}
