"""
Abstract base for catalog store backends.
Every backend returns the same Product list — the rest of the bot doesn't
care which store is behind it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    image_src: str
    link: str
    # None = tags absent or not a list on the wire; such a product never matches
    color_tags: Optional[tuple[str, ...]]
    created_at: Optional[str] = None


@dataclass(frozen=True)
class NewProduct:
    """Body of a create request."""
    name: str
    image_src: str
    link: str
    color_tags: tuple[str, ...] = ()

    def to_json(self) -> dict:
        return {
            "name":      self.name,
            "imageSrc":  self.image_src,
            "link":      self.link,
            "colorTags": list(self.color_tags),
        }


class CatalogBackend(ABC):
    """All backends must implement this interface."""

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """
        Fetch the catalog, newest first.
        Raises CatalogUnavailable on any failure.
        """
        ...

    @abstractmethod
    async def create_product(self, product: NewProduct) -> Product:
        """
        Store a new product and return it as the store saw it.
        Raises CatalogWriteFailed on any failure.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name for logs/display."""
        ...
