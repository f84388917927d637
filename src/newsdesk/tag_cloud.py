from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .models import Post, TagCloudEntry

MIN_SIZE = 0.85
MAX_SIZE = 1.60


def count_tags(posts: Iterable[Post]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for post in posts:
        for tag in post.tags:
            if tag.deleted:
                continue
            label = tag.label
            if not label:
                continue
            counts[label] = counts.get(label, 0) + 1
    return counts


def _round_size(value: float) -> float:
    # Decimal(float) is exact, so ties are decided on the binary value.
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def build_tag_cloud(posts: Iterable[Post]) -> list[TagCloudEntry]:
    counts = count_tags(posts)
    if not counts:
        return []

    highest = max(counts.values())
    lowest = min(counts.values())

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    entries: list[TagCloudEntry] = []
    for label, count in ranked:
        ratio = 0.5 if highest == lowest else (count - lowest) / (highest - lowest)
        size = _round_size(MIN_SIZE + (MAX_SIZE - MIN_SIZE) * ratio)
        entries.append(TagCloudEntry(label=label, size=size, count=count))
    return entries
