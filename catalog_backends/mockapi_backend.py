"""
MockAPI catalog backend.

Sign up at: https://mockapi.io
Create a project, then a resource named "products" with the fields
name, imageSrc, link, colorTags (array). The resource URL is the endpoint.

  GET  <endpoint>?limit=100&sortBy=createdAt&order=desc  → list of products
  POST <endpoint>   {name, imageSrc, link, colorTags}    → created product

Products are entered by hand, so the parser is lenient: a missing or
non-list colorTags becomes "no tags" rather than an error.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from catalog_backends.base import CatalogBackend, NewProduct, Product
from errors import CatalogUnavailable, CatalogWriteFailed

logger = logging.getLogger(__name__)


class MockAPIBackend(CatalogBackend):

    def __init__(self, endpoint: str, limit: int = 100, timeout_secs: float = 15) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._limit    = limit
        self._timeout  = aiohttp.ClientTimeout(total=timeout_secs)

    @property
    def name(self) -> str:
        return "MockAPI"

    async def list_products(self) -> list[Product]:
        params = {
            "limit":  str(self._limit),
            "sortBy": "createdAt",
            "order":  "desc",
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(self._endpoint, params=params, timeout=self._timeout) as resp:
                    if resp.status != 200:
                        text = await resp.text()
                        raise CatalogUnavailable(f"MockAPI error {resp.status}: {text[:200]}")
                    data = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise CatalogUnavailable(f"MockAPI request failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise CatalogUnavailable("MockAPI request timed out") from exc
        except ValueError as exc:
            raise CatalogUnavailable(f"MockAPI returned invalid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise CatalogUnavailable(f"MockAPI returned {type(data).__name__}, expected a list")

        products: list[Product] = []
        for raw in data:
            product = _parse_product(raw)
            if product:
                products.append(product)
        logger.info("MockAPI returned %d products (%d skipped)", len(products), len(data) - len(products))
        return products

    async def create_product(self, product: NewProduct) -> Product:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self._endpoint, json=product.to_json(), timeout=self._timeout) as resp:
                    if resp.status not in (200, 201):
                        text = await resp.text()
                        raise CatalogWriteFailed(f"MockAPI error {resp.status}: {text[:200]}")
                    data = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise CatalogWriteFailed(f"MockAPI request failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise CatalogWriteFailed("MockAPI request timed out") from exc
        except ValueError as exc:
            raise CatalogWriteFailed(f"MockAPI returned invalid JSON: {exc}") from exc

        created = _parse_product(data)
        if created is None:
            raise CatalogWriteFailed(f"MockAPI returned an unusable product: {str(data)[:200]}")
        logger.info("MockAPI created product %s (%s)", created.id, created.name)
        return created


# ── Parser ─────────────────────────────────────────────────────────────────────

def _parse_color_tags(raw) -> Optional[tuple[str, ...]]:
    if not isinstance(raw, list):
        return None
    return tuple(tag for tag in raw if isinstance(tag, str))


def _parse_product(raw) -> Optional[Product]:
    if not raw or not isinstance(raw, dict):
        logger.warning("Skipping non-object catalog entry: %r", raw)
        return None
    product_id = raw.get("id")
    return Product(
        id=str(product_id) if product_id is not None else "",
        name=str(raw.get("name") or "").strip(),
        image_src=str(raw.get("imageSrc") or ""),
        link=str(raw.get("link") or ""),
        color_tags=_parse_color_tags(raw.get("colorTags")),
        created_at=raw.get("createdAt"),
    )
