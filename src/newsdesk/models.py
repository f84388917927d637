from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MINI_MARKER = "mini"


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    display_name: str | None = None
    deleted: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_null(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("deleted", mode="before")
    @classmethod
    def _deleted_not_null(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def label(self) -> str:
        return (self.display_name or self.name or "").strip()

    @property
    def is_mini(self) -> bool:
        return self.label.lower() == MINI_MARKER


class Post(BaseModel):
    """One post as consumed by the landing page.

    The API nests post, creator, community and counters in separate objects;
    ``from_view`` flattens that shape. Anything not declared here is ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    name: str = ""
    url: str | None = None
    body: str | None = None
    alt_text: str | None = None
    nsfw: bool = False
    published_at: str | None = None
    updated_at: str | None = None
    score: int = 0
    comments: int = 0
    thumbnail_url: str | None = None
    creator_name: str = ""
    community_name: str = ""
    community_title: str = ""
    community_nsfw: bool = False
    tags: list[Tag] = Field(default_factory=list)
    image_details_link: str | None = None

    @field_validator("nsfw", "community_nsfw", mode="before")
    @classmethod
    def _flag_not_null(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("score", "comments", mode="before")
    @classmethod
    def _count_not_null(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("name", "creator_name", "community_name", "community_title", mode="before")
    @classmethod
    def _text_not_null(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_not_null(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_nsfw(self) -> bool:
        return self.nsfw or self.community_nsfw

    @classmethod
    def from_view(cls, payload: dict[str, Any]) -> Post:
        if "post" not in payload:
            return cls.model_validate(payload)
        post = payload.get("post") or {}
        creator = payload.get("creator") or {}
        community = payload.get("community") or {}
        counts = payload.get("counts") or {}
        image_details = payload.get("image_details") or {}
        return cls.model_validate(
            {
                "id": post.get("id"),
                "name": post.get("name"),
                "url": post.get("url"),
                "body": post.get("body"),
                "alt_text": post.get("alt_text"),
                "nsfw": post.get("nsfw"),
                "published_at": post.get("published_at") or post.get("published"),
                "updated_at": post.get("updated_at") or post.get("updated"),
                "score": post.get("score", counts.get("score")),
                "comments": post.get("comments", counts.get("comments")),
                "thumbnail_url": post.get("thumbnail_url"),
                "creator_name": creator.get("name"),
                "community_name": community.get("name"),
                "community_title": community.get("title") or community.get("name"),
                "community_nsfw": community.get("nsfw"),
                "tags": payload.get("tags"),
                "image_details_link": image_details.get("link"),
            }
        )


class PostPage(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    posts: list[Post] = Field(default_factory=list)
    next_page: str | None = None

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> PostPage:
        items = payload.get("posts") or []
        return cls(
            posts=[Post.from_view(item) for item in items if isinstance(item, dict)],
            next_page=payload.get("next_page"),
        )


@dataclass(frozen=True)
class TagCloudEntry:
    label: str
    size: float
    count: int
