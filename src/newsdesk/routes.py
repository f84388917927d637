from __future__ import annotations

from urllib.parse import quote


def post_path(post_id: int) -> str:
    return f"/post/{int(post_id)}"


def user_path(name: str) -> str:
    return f"/u/{quote(name, safe='@.')}"


def community_path(name: str) -> str:
    return f"/c/{quote(name, safe='@.')}"
