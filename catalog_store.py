"""
catalog_store.py — public interface to the product catalog.

The rest of the bot imports only from here:
  from catalog_store import fetch_catalog, snapshot, add_product, Product

The catalog is held as one module-level tuple. It is read-only for the
matcher and replaced wholesale after every fetch — including the re-fetch
that follows a successful create — never patched in place.
"""
from __future__ import annotations

import logging
from typing import Optional

from catalog_backends.base import CatalogBackend, NewProduct, Product
from errors import CatalogUnavailable
import config

logger = logging.getLogger(__name__)

__all__ = [
    "Product", "is_configured", "get_backend", "fetch_catalog", "snapshot",
    "parse_color_list", "add_product",
]

_backend: Optional[CatalogBackend] = None
_snapshot: tuple[Product, ...] = ()


def is_configured() -> bool:
    return bool(config.CATALOG_ENDPOINT)


def get_backend() -> CatalogBackend:
    """Return the active backend, initialising it once on first call."""
    global _backend
    if _backend is not None:
        return _backend
    if not is_configured():
        raise CatalogUnavailable("CATALOG_ENDPOINT is not set. Add your MockAPI URL to .env.")

    from catalog_backends.mockapi_backend import MockAPIBackend
    _backend = MockAPIBackend(
        config.CATALOG_ENDPOINT,
        limit=config.CATALOG_LIMIT,
        timeout_secs=config.HTTP_TIMEOUT_SECS,
    )
    logger.info("Catalog backend: %s (%s)", _backend.name, config.CATALOG_ENDPOINT)
    return _backend


def snapshot() -> tuple[Product, ...]:
    """The most recently fetched catalog (empty until the first fetch)."""
    return _snapshot


async def fetch_catalog() -> tuple[Product, ...]:
    """
    Load the catalog and replace the snapshot.

    On failure the snapshot is emptied, so a broken store never leaves stale
    products behind, and CatalogUnavailable is raised.
    """
    global _snapshot
    try:
        products = await get_backend().list_products()
    except CatalogUnavailable as exc:
        logger.error("Failed to fetch products: %s", exc)
        _snapshot = ()
        raise
    _snapshot = tuple(products)
    return _snapshot


def parse_color_list(text: str) -> list[str]:
    """'Black, white ,, red' → ['Black', 'white', 'red']"""
    return [part.strip() for part in (text or "").split(",") if part.strip()]


async def add_product(
    name: str,
    image_src: str,
    link: str,
    main_colors: str = "",
    side_colors: str = "",
) -> tuple[Product, ...]:
    """
    Create a product and return the refreshed catalog.

    Colors are comma-separated strings; main and side colors are stored
    together as the product's colorTags (main first).

    Raises:
        ValueError:         name, image_src or link is blank.
        CatalogWriteFailed: the store rejected the product.
        CatalogUnavailable: the product was saved but the refresh failed.
    """
    name, image_src, link = name.strip(), image_src.strip(), link.strip()
    if not (name and image_src and link):
        raise ValueError("name, image_src and link are required")

    new = NewProduct(
        name=name,
        image_src=image_src,
        link=link,
        color_tags=tuple(parse_color_list(main_colors) + parse_color_list(side_colors)),
    )
    await get_backend().create_product(new)
    return await fetch_catalog()
