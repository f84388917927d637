from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .client import PostsClient
from .config import Config, ConfigError, load_config
from .feeds import fetch_feeds
from .landing import ExecutionContext, LandingState
from .utils import log_event, utc_now_iso
from .view import compose_landing

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))

app = FastAPI(title="Newsdesk")


def get_config() -> Config:
    try:
        return load_config()
    except ConfigError as exc:
        log_event(logging.getLogger("newsdesk.web"), logging.ERROR, "config_error", error=str(exc))
        raise HTTPException(status_code=500, detail="config_error") from exc


async def get_posts_client(
    request: Request, config: Config = Depends(get_config)
) -> AsyncIterator[PostsClient]:
    client = PostsClient.for_request(
        config.api.internal_base_url,
        request.headers,
        user_agent=config.api.user_agent,
    )
    try:
        yield client
    finally:
        await client.aclose()


async def _server_state(client) -> LandingState:
    bundle = await fetch_feeds(client, logger=logging.getLogger("newsdesk.web"))
    return LandingState(client, snapshot=bundle, context=ExecutionContext.SERVER)


@app.get("/", response_class=HTMLResponse)
async def landing(
    request: Request,
    retry: bool = False,
    config: Config = Depends(get_config),
    client=Depends(get_posts_client),
):
    """Server-render the landing page.

    Every render fetches all three feeds afresh, so the Retry link
    (``/?retry=1``) needs no special handling; ``retry`` is only logged.
    """
    state = await _server_state(client)
    view = compose_landing(state, config=config)
    log_event(
        logging.getLogger("newsdesk.web"),
        logging.INFO,
        "landing_render",
        retry=retry,
        **{name: slot.kind.value for name, slot in state.bundle.items()},
    )
    return TEMPLATES.TemplateResponse(request, "landing.html", {"view": view})


@app.get("/api/landing")
async def landing_snapshot(client=Depends(get_posts_client)) -> dict[str, object]:
    state = await _server_state(client)
    return state.snapshot()


@app.get("/health")
def health() -> dict[str, object]:
    return {
        "ok": True,
        "version": _get_version(),
        "time": utc_now_iso(),
    }


def _get_version() -> str:
    try:
        from importlib.metadata import version

        return version("newsdesk")
    except Exception:  # noqa: BLE001
        return "unknown"
