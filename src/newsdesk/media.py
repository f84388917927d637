from __future__ import annotations

import re
from urllib.parse import urlsplit

IMAGE_EXTENSIONS = ("jpg", "jpeg", "gif", "png", "svg", "webp", "avif", "jxl")

_IMAGE_PATH_RE = re.compile(r"\.(?:" + "|".join(IMAGE_EXTENSIONS) + r")$", re.IGNORECASE)


def is_image_url(url: str | None) -> bool:
    if not url:
        return False
    split = urlsplit(url.strip())
    if split.scheme and split.scheme.lower() not in {"http", "https"}:
        return False
    return bool(_IMAGE_PATH_RE.search(split.path))
