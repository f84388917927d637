from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from .media import is_image_url
from .models import Post, Tag
from .utils import hostname

ImagePredicate = Callable[[str], bool]


@dataclass(frozen=True)
class PostPresentation:
    """How a single news post is shown below its title.

    ``image_url`` and ``external_url`` are mutually exclusive; in condensed
    mode both are ``None`` and ``render_body`` is ``False``.
    """

    condensed: bool
    image_url: str | None
    image_href: str | None
    image_opens_new_context: bool
    external_url: str | None
    external_hostname: str | None
    render_body: bool
    nsfw: bool
    alt_text: str | None

    @property
    def has_link_content(self) -> bool:
        return bool(self.image_url or self.external_url)


def has_mini_tag(tags: Iterable[Tag]) -> bool:
    return any(tag.is_mini for tag in tags)


def resolve_image_url(post: Post, is_image: ImagePredicate = is_image_url) -> str | None:
    if post.image_details_link:
        return post.image_details_link
    if post.url and is_image(post.url):
        return post.url
    if post.thumbnail_url and is_image(post.thumbnail_url):
        return post.thumbnail_url
    return None


def gallery_thumbnail(post: Post, is_image: ImagePredicate = is_image_url) -> str | None:
    return resolve_image_url(post, is_image) or post.thumbnail_url


def present_post(post: Post, is_image: ImagePredicate = is_image_url) -> PostPresentation:
    condensed = has_mini_tag(post.tags)
    image_url = None if condensed else resolve_image_url(post, is_image)

    image_href = None
    opens_new_context = False
    external_url = None
    external_hostname = None
    if image_url:
        image_href = post.url or image_url
        opens_new_context = bool(post.url)
    elif post.url and not condensed:
        external_url = post.url
        external_hostname = hostname(post.url) or post.url

    return PostPresentation(
        condensed=condensed,
        image_url=image_url,
        image_href=image_href,
        image_opens_new_context=opens_new_context,
        external_url=external_url,
        external_hostname=external_hostname,
        render_body=bool(post.body) and not condensed,
        nsfw=post.is_nsfw,
        alt_text=post.alt_text,
    )
