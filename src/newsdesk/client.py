from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from .models import PostPage
from .request_state import RequestState

POSTS_PATH = "/api/v4/post/list"

FORWARDED_HEADERS = (
    "accept-language",
    "authorization",
    "cookie",
    "user-agent",
    "x-forwarded-for",
    "x-real-ip",
)


@dataclass(frozen=True)
class PostQuery:
    sort: str
    limit: int
    community_name: str | None = None
    type_: str | None = None

    def params(self) -> dict[str, str]:
        params = {"sort": self.sort, "limit": str(self.limit)}
        if self.community_name:
            params["community_name"] = self.community_name
        if self.type_:
            params["type_"] = self.type_
        return params


def forwardable_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    selected: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in FORWARDED_HEADERS and value:
            selected[key.lower()] = value
    return selected


class PostsClient:
    """Async client for the post listing endpoint.

    ``get_posts`` never raises for transport or API faults; it returns a
    failed ``RequestState`` carrying the error message as reported.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        default_headers: dict[str, str] = {"accept": "application/json"}
        if user_agent:
            default_headers["user-agent"] = user_agent
        default_headers.update(headers or {})
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=default_headers,
            timeout=None,
            transport=transport,
        )

    @classmethod
    def for_request(
        cls,
        base_url: str,
        headers: Mapping[str, str] | None,
        **kwargs: Any,
    ) -> PostsClient:
        return cls(base_url, headers=forwardable_headers(headers), **kwargs)

    async def get_posts(self, query: PostQuery) -> RequestState[PostPage]:
        try:
            response = await self._client.get(POSTS_PATH, params=query.params())
        except httpx.HTTPError as exc:
            return RequestState.failed(exc)
        if response.is_error:
            return RequestState.failed(_error_message(response))
        try:
            payload = response.json()
        except ValueError:
            return RequestState.failed("invalid JSON in posts response")
        if not isinstance(payload, dict):
            return RequestState.failed("posts response must be an object")
        try:
            page = PostPage.from_response(payload)
        except ValidationError as exc:
            return RequestState.failed(str(exc))
        return RequestState.success(page)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PostsClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"
