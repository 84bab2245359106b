"""Cart state — immutable snapshots of the shopper's cart.

A line item is identified by its product plus the normalized variant
selection. Product details (name, price, slug, thumbnail) are copied when the
item is added and never re-fetched while the item sits in the cart.
"""

import random
import string
import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType

CART_MAX_ITEMS = 10
CART_STORAGE_KEY = "gayla-shop-cart"

_BASE36 = string.digits + string.ascii_lowercase


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_cart_item_id() -> str:
    """Internal id used to address a line in the UI; not a business identity."""
    suffix = "".join(random.choices(_BASE36, k=6))
    return f"ci_{now_ms()}_{suffix}"


def variants_match(a: dict, b: dict) -> bool:
    """Same keys and identical values, key order ignored, case-sensitive."""
    if set(a) != set(b):
        return False
    return all(a[key] == b[key] for key in a)


def line_item_key(product_id: str, variants: dict) -> str:
    """Stable string form of a line identity, e.g. ``prod-1-Color:Red|Size:M``."""
    variant_str = "|".join(f"{k}:{v}" for k, v in sorted(variants.items()))
    return f"{product_id}-{variant_str}"


def format_variants(variants: dict) -> str:
    """Format a variant selection for display (``Size: M, Color: Blue``)."""
    return ", ".join(f"{key}: {value}" for key, value in variants.items())


@dataclass(frozen=True)
class CartLineItem:
    """One product+variant entry in the cart."""

    cart_item_id: str
    product_id: str
    name: str
    price: float
    quantity: int
    slug: str = ""
    thumbnail: str | None = None
    variants: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # Snapshots are immutable, variants included
        if not isinstance(self.variants, MappingProxyType):
            object.__setattr__(self, "variants", MappingProxyType(dict(self.variants)))

    @property
    def key(self) -> str:
        return line_item_key(self.product_id, dict(self.variants))

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def matches(self, product_id: str, variants: dict) -> bool:
        return self.product_id == product_id and variants_match(dict(self.variants), variants)

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)


@dataclass(frozen=True)
class CartState:
    """Ordered line items plus the time of the last mutation (ms since epoch)."""

    items: tuple = ()
    updated_at: int = 0

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def find(self, product_id: str, variants: dict) -> CartLineItem | None:
        return next((item for item in self.items if item.matches(product_id, variants)), None)

    def get(self, cart_item_id: str) -> CartLineItem | None:
        return next((item for item in self.items if item.cart_item_id == cart_item_id), None)

    @property
    def is_full(self) -> bool:
        return len(self.items) >= CART_MAX_ITEMS


EMPTY_CART = CartState()
