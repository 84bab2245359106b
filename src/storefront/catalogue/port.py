"""Catalogue port — read-only product lookup.

Order creation resolves names, slugs and prices through this interface, and
checkout re-validates cart contents against it. The catalogue itself is
managed elsewhere.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class VariantValue:
    label: str
    enabled: bool = True


@dataclass(frozen=True)
class VariantGroup:
    """A named set of choices, e.g. ``Size`` with ``S``/``M``/``L``."""

    name: str
    values: tuple[VariantValue, ...] = ()

    def find(self, label: str) -> VariantValue | None:
        return next((value for value in self.values if value.label == label), None)


@dataclass(frozen=True)
class ProductInfo:
    """Live product data as the catalogue currently knows it."""

    product_id: str
    name: str
    slug: str
    price: float
    images: tuple[str, ...] = ()
    status: str = "Active"
    variant_groups: tuple[VariantGroup, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.status == "Active"

    @property
    def thumbnail(self) -> str | None:
        return self.images[0] if self.images else None

    def variant_group(self, name: str) -> VariantGroup | None:
        return next((group for group in self.variant_groups if group.name == name), None)


class ProductCatalogue(ABC):
    """Abstract product lookup interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductInfo | None:
        """Return the product, or None when it does not exist."""
        ...
