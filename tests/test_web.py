import logging

from fastapi.testclient import TestClient

from newsdesk.config import load_config
from newsdesk.models import Post, PostPage, Tag
from newsdesk.request_state import RequestState
from newsdesk.utils import parse_iso
from newsdesk.web import app, get_config, get_posts_client


class FakeClient:
    def __init__(self, outcomes):
        self.outcomes = outcomes
        self.calls = []

    async def get_posts(self, query):
        self.calls.append(query)
        return self.outcomes[query.community_name or query.type_]


def _outcomes():
    news = PostPage(
        posts=[
            Post(
                id=1,
                name="Council approves budget",
                url="https://city.example.org/budget",
                body="Read the *full* report.",
                creator_name="reporter",
            ),
            Post(id=2, name="Quick note", body="secret", tags=[Tag(name="mini")]),
        ]
    )
    top = PostPage(
        posts=[
            Post(id=3, name="Most liked", community_title="Gallery", tags=[Tag(name="Funny")]),
            Post(id=4, name="Second", community_title="Tech", tags=[Tag(name="Funny"), Tag(name="Serious")]),
        ]
    )
    return {
        "news": RequestState.success(news),
        "gallery": RequestState.failed("network timeout"),
        "Local": RequestState.success(top),
    }


def _client(monkeypatch, fake):
    monkeypatch.delenv("NEWSDESK_CONFIG_PATH", raising=False)
    monkeypatch.setenv("NEWSDESK_SITE_NAME", "Test Site")
    config = load_config()
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_posts_client] = lambda: fake
    return TestClient(app)


def test_landing_page_renders_sections(monkeypatch):
    fake = FakeClient(_outcomes())
    try:
        client = _client(monkeypatch, fake)
        response = client.get("/")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    html = response.text
    assert "<title>News - Test Site</title>" in html
    assert "Council approves budget" in html
    assert ">city.example.org</a>" in html
    assert "<em>full</em>" in html
    assert "secret" not in html
    assert "network timeout" in html
    assert 'href="/?retry=1"' in html
    assert "Most liked" in html
    assert "font-size: 1.6rem" in html
    assert len(fake.calls) == 3


def test_retry_reissues_all_feeds(monkeypatch, caplog):
    fake = FakeClient(_outcomes())
    try:
        client = _client(monkeypatch, fake)
        client.get("/")
        with caplog.at_level(logging.INFO, logger="newsdesk.web"):
            response = client.get("/", params={"retry": "1"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert len(fake.calls) == 6
    assert "event=landing_render retry=True" in caplog.text


def test_landing_snapshot_json(monkeypatch):
    fake = FakeClient(_outcomes())
    try:
        client = _client(monkeypatch, fake)
        response = client.get("/api/landing")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    payload = response.json()
    assert payload["gallery"] == {"state": "failed", "error": "network timeout"}
    assert payload["news"]["state"] == "success"
    assert payload["news"]["data"]["posts"][0]["name"] == "Council approves budget"


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert parse_iso(payload["time"]).tzinfo is not None
