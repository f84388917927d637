from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from pydantic import ValidationError

from .client import PostQuery
from .models import PostPage
from .request_state import EMPTY_REQUEST, LOADING_REQUEST, RequestState, RequestStateError
from .utils import log_event

FEED_NAMES = ("news", "gallery", "top")

FEED_QUERIES: dict[str, PostQuery] = {
    "news": PostQuery(sort="New", limit=20, community_name="news"),
    "gallery": PostQuery(sort="Top", limit=3, community_name="gallery"),
    "top": PostQuery(sort="Top", limit=10, type_="Local"),
}


@dataclass(frozen=True)
class FeedBundle:
    news: RequestState[PostPage] = EMPTY_REQUEST
    gallery: RequestState[PostPage] = EMPTY_REQUEST
    top: RequestState[PostPage] = EMPTY_REQUEST

    @classmethod
    def all_empty(cls) -> FeedBundle:
        return cls()

    @classmethod
    def all_loading(cls) -> FeedBundle:
        return cls(news=LOADING_REQUEST, gallery=LOADING_REQUEST, top=LOADING_REQUEST)

    def items(self) -> Iterator[tuple[str, RequestState[PostPage]]]:
        for name in FEED_NAMES:
            raw = payload.get(name)
            if not isinstance(raw, dict):
                raise RequestStateError(f"snapshot is missing feed {name!r}")
            try:
                if "state" not in raw:
                    # bare PostPage payloads count as successful fetches
                    slots[name] = RequestState.success(PostPage.model_validate(raw))
                else:
                    slots[name] = RequestState.from_dict(raw, PostPage.model_validate)
            except ValidationError as exc:
                raise RequestStateError(f"snapshot feed {name!r} is invalid") from exc
        return cls(**slots)


async def fetch_feeds(client, logger: logging.Logger | None = None) -> FeedBundle:
    """Fetch all three feeds concurrently and wait for every outcome."""
    logger = logger or logging.getLogger("newsdesk.feeds")
    outcomes = await asyncio.gather(
        *(client.get_posts(FEED_QUERIES[name]) for name in FEED_NAMES),
        return_exceptions=True,
    )
    bundle = FeedBundle(
        **{name: _as_state(outcome) for name, outcome in zip(FEED_NAMES, outcomes)}
    )
    for name, state in bundle.items():
        if state.is_failed:
            log_event(logger, logging.WARNING, "feed_fetch_failed", feed=name, error=state.error.message)
    return bundle


def _as_state(outcome: Any) -> RequestState[PostPage]:
    if isinstance(outcome, BaseException):
        return RequestState.failed(outcome)
    return outcome
