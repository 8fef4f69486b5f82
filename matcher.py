"""
matcher.py — decides which catalog products match a shoe's detected colors.

Two rules, chosen by how many colors were detected:

  ≥ 3 colors  →  broad match:  the product shares at least 3 tags with the
                 detected colors
  < 3 colors  →  exact subset: every detected color is among the product's tags

All comparisons are case-insensitive. The result is a filter over the catalog
in catalog order; nothing is ranked.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from catalog_backends.base import Product
from image_analyzer import ColorAnalysis

# Detected-color count at which the broad rule takes over. Counted over the raw
# list, so a repeated color name counts twice.
BROAD_MATCH_THRESHOLD = 3
# Tags a product must share with the detected colors under the broad rule
BROAD_MATCH_MIN_SHARED = 3


def detected_colors(analysis: ColorAnalysis) -> list[str]:
    """Main then side colors, lower-cased, duplicates kept."""
    return [c.lower() for c in analysis.all_colors]


def _tags(product: Product) -> Optional[list[str]]:
    tags = product.color_tags
    if not isinstance(tags, (list, tuple)):
        return None
    return [t.lower() for t in tags if isinstance(t, str)]


def _shares_enough(tags: list[str], detected_set: set[str]) -> bool:
    # One hit per tag occurrence: duplicate tags on a product each count
    shared = sum(1 for tag in tags if tag in detected_set)
    return shared >= BROAD_MATCH_MIN_SHARED


def _contains_all(tags: list[str], detected: list[str]) -> bool:
    tag_set = set(tags)
    return all(color in tag_set for color in detected)


def match(detected: Sequence[str], catalog: Iterable[Product]) -> list[Product]:
    """
    Return the products of `catalog` that match `detected`, in catalog order.

    Products without a tag list never match. An empty `detected` falls under
    the exact-subset rule and therefore matches every product that has a tag
    list, even an empty one.
    """
    lowered = [c.lower() for c in detected]
    detected_set = set(lowered)
    broad = len(lowered) >= BROAD_MATCH_THRESHOLD

    matches: list[Product] = []
    for product in catalog:
        tags = _tags(product)
        if tags is None:
            continue
        if broad:
            if _shares_enough(tags, detected_set):
                matches.append(product)
        elif _contains_all(tags, lowered):
            matches.append(product)
    return matches
