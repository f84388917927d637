from __future__ import annotations

import re
from typing import Callable

import markdown
from bs4 import BeautifulSoup
from markdown.extensions import Extension

OnImageLoad = Callable[[str], None]

_STRIPPED_TAGS = ["script", "style", "iframe", "object", "embed", "form"]
_URL_ATTRS = ("href", "src", "action", "formaction", "xlink:href", "poster", "background")
_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")
_IGNORED_URL_CHARS = re.compile(r"[\x00-\x20\x7f]+")
_MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "footnotes", "sane_lists"]


class NoRawHtmlExtension(Extension):
    """Escape raw HTML in post bodies instead of passing it through."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


def is_unsafe_url(value: str) -> bool:
    # browsers ignore whitespace and control characters inside the scheme
    normalized = _IGNORED_URL_CHARS.sub("", value).lower()
    return normalized.startswith(_UNSAFE_SCHEMES)


class MarkupRenderer:
    """Markdown to HTML with a notification hook for embedded images.

    Raw HTML in the source is escaped. Each ``<img>`` found in rendered output
    is registered against the callback passed to ``render``;
    ``image_loaded(src)`` fires and clears those callbacks once the asset is
    available.
    """

    def __init__(self) -> None:
        self._pending: dict[str, list[OnImageLoad]] = {}

    def render(self, source: str, on_async_image_load: OnImageLoad | None = None) -> str:
        if not source:
            return ""
        html = markdown.markdown(
            source, extensions=[*_MARKDOWN_EXTENSIONS, NoRawHtmlExtension()]
        )
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(_STRIPPED_TAGS):
            tag.decompose()
        for tag in soup.find_all(True):
            for attr in list(tag.attrs):
                if attr.lower().startswith("on"):
                    del tag[attr]
            for attr in _URL_ATTRS:
                value = tag.get(attr)
                if isinstance(value, str) and is_unsafe_url(value):
                    del tag[attr]
        for img in soup.find_all("img"):
            img["loading"] = "lazy"
            src = img.get("src")
            if src and on_async_image_load is not None:
                self._pending.setdefault(src, []).append(on_async_image_load)
        return str(soup)

    def pending_images(self) -> list[str]:
        return sorted(self._pending)

    def image_loaded(self, src: str) -> int:
        callbacks = self._pending.pop(src, [])
        for callback in callbacks:
            callback(src)
        return len(callbacks)
