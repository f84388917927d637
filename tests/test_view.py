from datetime import datetime, timezone

from newsdesk.config import load_config
from newsdesk.feeds import FeedBundle
from newsdesk.landing import LandingState
from newsdesk.markup import MarkupRenderer
from newsdesk.models import Post, PostPage, Tag
from newsdesk.request_state import LOADING_REQUEST, RequestState
from newsdesk.view import compose_landing, document_title, format_shortcut, relative_time


def _config(monkeypatch):
    monkeypatch.delenv("NEWSDESK_CONFIG_PATH", raising=False)
    monkeypatch.setenv("NEWSDESK_SITE_NAME", "Test Site")
    return load_config()


def _state(bundle: FeedBundle) -> LandingState:
    return LandingState(client=None, snapshot=bundle)


def test_title_and_shortcuts(monkeypatch):
    view = compose_landing(_state(FeedBundle()), config=_config(monkeypatch))
    assert view["title"] == "News - Test Site"
    assert view["shortcuts"][0] == {"label": "News", "href": "/c/news"}
    assert [item["label"] for item in view["shortcuts"]][-1] == "Blogs"
    assert view["news"] == {"status": "empty"}


def test_helpers():
    assert document_title("Lemmy") == "News - Lemmy"
    assert format_shortcut("talks") == "Talks"
    now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert relative_time("2025-01-01T09:00:00Z", now=now) == "3 hours ago"
    assert relative_time("2025-01-01T11:59:30Z", now=now) == "just now"
    assert relative_time(None, now=now) == ""


def test_failed_gallery_section_shows_message_and_retry(monkeypatch):
    bundle = FeedBundle(
        news=RequestState.success(PostPage(posts=[Post(id=1, name="Story")])),
        gallery=RequestState.failed("network timeout"),
        top=RequestState.success(PostPage()),
    )
    view = compose_landing(_state(bundle), config=_config(monkeypatch), retry_url="/?retry=1")

    assert view["gallery"] == {"status": "failed", "error": "network timeout", "retry_url": "/?retry=1"}
    assert view["news"]["status"] == "success"
    assert view["news"]["items"][0]["href"] == "/post/1"
    assert view["top"]["items"] == []
    assert view["tag_cloud"]["items"] == []
    assert view["tag_cloud"]["empty_message"] == "None found."


def test_top_feed_failure_also_fails_tag_cloud(monkeypatch):
    bundle = FeedBundle(news=LOADING_REQUEST, gallery=LOADING_REQUEST, top=RequestState.failed("boom"))
    view = compose_landing(_state(bundle), config=_config(monkeypatch))
    assert view["news"]["status"] == "loading"
    assert view["top"]["error"] == "boom"
    assert view["tag_cloud"]["error"] == "boom"


def test_top_posts_limited_and_tag_cloud_built(monkeypatch):
    posts = [
        Post(id=i, name=f"Top {i}", community_name="tech", community_title="Tech", tags=[Tag(name="rust")])
        for i in range(1, 13)
    ]
    bundle = FeedBundle(top=RequestState.success(PostPage(posts=posts)))
    view = compose_landing(_state(bundle), config=_config(monkeypatch))

    assert len(view["top"]["items"]) == 10
    assert view["top"]["items"][0]["community_title"] == "Tech"
    assert view["top"]["items"][0]["community_href"] == "/c/tech"
    assert [(entry.label, entry.count) for entry in view["tag_cloud"]["items"]] == [("rust", 12)]


def test_news_items_render_body_and_notify_on_image_load(monkeypatch):
    posts = [
        Post(id=7, name="With body", body="![chart](https://cdn.example.com/chart.png)"),
        Post(id=8, name="Mini", body="hidden body", tags=[Tag(name="mini")]),
    ]
    state = _state(FeedBundle(news=RequestState.success(PostPage(posts=posts))))
    renders = []
    state.subscribe(renders.append)
    renderer = MarkupRenderer()

    view = compose_landing(state, config=_config(monkeypatch), renderer=renderer)
    items = view["news"]["items"]

    assert "chart.png" in items[0]["body_html"]
    assert items[1]["body_html"] is None
    assert items[1]["presentation"].condensed is True

    renderer.image_loaded("https://cdn.example.com/chart.png")
    assert len(renders) == 1
