from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from .config import Config
from .landing import LandingState
from .markup import MarkupRenderer
from .models import Post, PostPage
from .presentation import gallery_thumbnail, present_post
from .request_state import FetchFailure, RequestState
from .routes import community_path, post_path, user_path
from .tag_cloud import build_tag_cloud
from .utils import parse_iso

NO_POSTS = "No posts."
NONE_FOUND = "None found."
TOP_POSTS_LIMIT = 10


def document_title(site_name: str) -> str:
    return f"News - {site_name}"


def format_shortcut(shortcut: str) -> str:
    return shortcut[:1].upper() + shortcut[1:]


def relative_time(value: str | None, now: datetime | None = None) -> str:
    moment = parse_iso(value)
    if moment is None:
        return ""
    now = now or datetime.now(tz=timezone.utc)
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"
    for size, unit in ((86400 * 365, "year"), (86400 * 30, "month"), (86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= size:
            amount = seconds // size
            return f"{amount} {unit}{'s' if amount != 1 else ''} ago"
    return "just now"


def _section(
    state: RequestState[PostPage],
    retry_url: str,
    on_success: Callable[[PostPage], dict[str, Any]],
) -> dict[str, Any]:
    def failed(error: FetchFailure) -> dict[str, Any]:
        return {"status": "failed", "error": error.message, "retry_url": retry_url}

    return state.match(
        empty=lambda: {"status": "empty"},
        loading=lambda: {"status": "loading"},
        success=lambda page: {"status": "success", **on_success(page)},
        failed=failed,
    )


def _news_item(post: Post, state: LandingState, renderer: MarkupRenderer) -> dict[str, Any]:
    presentation = present_post(post)
    body_html = None
    if presentation.render_body and post.body:
        body_html = renderer.render(
            post.body,
            lambda src, post_id=post.id: state.notify_asset_loaded(post_id, src),
        )
    return {
        "id": post.id,
        "title": post.name,
        "href": post_path(post.id),
        "creator": post.creator_name,
        "creator_href": user_path(post.creator_name),
        "published": relative_time(post.published_at),
        "published_at": post.published_at,
        "edited": bool(post.updated_at),
        "score": post.score,
        "comments": post.comments,
        "presentation": presentation,
        "body_html": body_html,
    }


def _gallery_item(post: Post) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.name,
        "href": post_path(post.id),
        "thumbnail": gallery_thumbnail(post),
        "alt_text": post.alt_text,
        "nsfw": post.is_nsfw,
        "score": post.score,
        "comments": post.comments,
    }


def _top_item(post: Post) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.name,
        "href": post_path(post.id),
        "community_title": post.community_title,
        "community_href": community_path(post.community_name) if post.community_name else None,
    }


def compose_landing(
    state: LandingState,
    *,
    config: Config,
    renderer: MarkupRenderer | None = None,
    retry_url: str = "/?retry=1",
) -> dict[str, Any]:
    renderer = renderer or MarkupRenderer()

    def news(page: PostPage) -> dict[str, Any]:
        return {
            "items": [_news_item(post, state, renderer) for post in page.posts],
            "empty_message": NO_POSTS,
        }

    def gallery(page: PostPage) -> dict[str, Any]:
        return {"items": [_gallery_item(post) for post in page.posts], "empty_message": NO_POSTS}

    def top(page: PostPage) -> dict[str, Any]:
        posts = page.posts[:TOP_POSTS_LIMIT]
        return {"items": [_top_item(post) for post in posts], "empty_message": NO_POSTS}

    def tag_cloud(page: PostPage) -> dict[str, Any]:
        return {"items": build_tag_cloud(page.posts), "empty_message": NONE_FOUND}

    return {
        "title": document_title(config.app.site_name),
        "site_name": config.app.site_name,
        "shortcuts": [
            {"label": format_shortcut(name), "href": community_path(name)}
            for name in config.landing.community_shortcuts
        ],
        "news": _section(state.news, retry_url, news),
        "gallery": _section(state.gallery, retry_url, gallery),
        "top": _section(state.top, retry_url, top),
        "tag_cloud": _section(state.top, retry_url, tag_cloud),
    }
