from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from .feeds import FeedBundle, fetch_feeds
from .models import PostPage
from .request_state import RequestState, RequestStateError
from .utils import log_event

Listener = Callable[[FeedBundle], None]


class ExecutionContext(str, Enum):
    SERVER = "server"
    CLIENT = "client"


class LandingState:
    """View state for the landing page.

    Owns the three feed slots. Slots change only through ``fetch_all``, which
    publishes the all-loading bundle and then the settled bundle, each as a
    single assignment. Overlapping calls are not guarded: whichever call
    settles last wins.
    """

    def __init__(
        self,
        client,
        *,
        snapshot: FeedBundle | dict[str, Any] | None = None,
        context: ExecutionContext = ExecutionContext.SERVER,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._listeners: list[Listener] = []
        self._seen_assets: set[tuple[int, str]] = set()
        self.context = context
        self.logger = logger or logging.getLogger("newsdesk.landing")
        self._bundle = FeedBundle.all_empty()
        self.is_isomorphic = False
        if snapshot is not None and not isinstance(snapshot, FeedBundle):
            try:
                snapshot = FeedBundle.from_snapshot(snapshot)
            except RequestStateError as exc:
                log_event(self.logger, logging.WARNING, "snapshot_rejected", error=str(exc))
                snapshot = None
        if snapshot is not None:
            self._bundle = snapshot
            self.is_isomorphic = True
            log_event(self.logger, logging.DEBUG, "landing_hydrated", context=context.value)

    @property
    def bundle(self) -> FeedBundle:
        return self._bundle

    @property
    def news(self) -> RequestState[PostPage]:
        return self._bundle.news

    @property
    def gallery(self) -> RequestState[PostPage]:
        return self._bundle.gallery

    @property
    def top(self) -> RequestState[PostPage]:
        return self._bundle.top

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, bundle: FeedBundle) -> None:
        self._bundle = bundle
        for listener in list(self._listeners):
            listener(bundle)

    async def mount(self) -> bool:
        if self.is_isomorphic or self.context is not ExecutionContext.CLIENT:
            return False
        await self.fetch_all()
        return True

    async def fetch_all(self) -> None:
        self._publish(FeedBundle.all_loading())
        log_event(self.logger, logging.INFO, "feeds_fetch_started", context=self.context.value)
        bundle = await fetch_feeds(self._client, logger=self.logger)
        self._publish(bundle)
        log_event(
            self.logger,
            logging.INFO,
            "feeds_fetch_complete",
            **{name: state.kind.value for name, state in bundle.items()},
        )

    async def retry(self) -> None:
        await self.fetch_all()

    def notify_asset_loaded(self, post_id: int, asset_url: str) -> bool:
        key = (post_id, asset_url)
        if key in self._seen_assets:
            return False
        self._seen_assets.add(key)
        self._publish(self._bundle)
        return True

    def snapshot(self) -> dict[str, Any]:
        return self._bundle.to_snapshot()
