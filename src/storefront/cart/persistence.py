"""Cart persistence — round-trip of CartState through key-value storage.

Client-local storage is unreliable (private browsing, quota limits, manual
edits). Nothing in here may raise to the cart: a bad record is discarded and
read back as an empty cart, and failed writes are logged and dropped.

The stored document is an external contract, so its shape is described with
pydantic models rather than trusted as-is::

    {"items": [{"cart_item_id": ..., "product_id": ..., "name": ...,
                "price": ..., "quantity": ..., "slug": ..., "thumbnail": ...,
                "variants": {...}}, ...],
     "updated_at": 1718000000000}
"""

import json

import structlog
from pydantic import BaseModel, Field, ValidationError

from storefront.cart.state import CART_MAX_ITEMS, CART_STORAGE_KEY, EMPTY_CART, CartLineItem, CartState
from storefront.cart.storage.port import KeyValueStorage

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Stored document schema
# ---------------------------------------------------------------------------
class StoredLineItem(BaseModel):
    cart_item_id: str
    product_id: str
    name: str
    price: float
    quantity: int = Field(ge=1)
    slug: str = ""
    thumbnail: str | None = None
    variants: dict[str, str] = Field(default_factory=dict)


class StoredCart(BaseModel):
    items: list[StoredLineItem]
    updated_at: int = 0

    @classmethod
    def from_state(cls, state: CartState) -> "StoredCart":
        return cls(
            items=[
                StoredLineItem(
                    cart_item_id=item.cart_item_id,
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    slug=item.slug,
                    thumbnail=item.thumbnail,
                    variants=dict(item.variants),
                )
                for item in state.items
            ],
            updated_at=state.updated_at,
        )

    def to_state(self) -> CartState:
        return CartState(
            items=tuple(CartLineItem(**item.model_dump()) for item in self.items),
            updated_at=self.updated_at,
        )


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------
class CartPersistence:
    """Reads and writes the cart snapshot under a single storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def read(self) -> CartState:
        try:
            raw = self.storage.get(self.key)
        except Exception as exc:
            logger.warning("Cart storage unavailable, starting empty", storage_key=self.key, error=str(exc))
            return EMPTY_CART

        if not raw:
            return EMPTY_CART

        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Cart record is not valid JSON, resetting", storage_key=self.key)
            self._discard()
            return EMPTY_CART

        if not isinstance(parsed, dict) or not isinstance(parsed.get("items"), list):
            logger.warning("Corrupted cart record detected, resetting", storage_key=self.key)
            self._discard()
            return EMPTY_CART

        if len(parsed["items"]) > CART_MAX_ITEMS:
            logger.warning(
                "Stored cart exceeds item cap, truncating",
                storage_key=self.key,
                stored_items=len(parsed["items"]),
                max_items=CART_MAX_ITEMS,
            )
            parsed["items"] = parsed["items"][:CART_MAX_ITEMS]

        # One malformed line discards the whole record; only the item count is trimmed
        try:
            stored = StoredCart.model_validate(parsed)
        except ValidationError as exc:
            logger.warning("Cart record failed validation, resetting", storage_key=self.key, errors=exc.error_count())
            self._discard()
            return EMPTY_CART

        return stored.to_state()

    def write(self, state: CartState) -> None:
        try:
            self.storage.set(self.key, StoredCart.from_state(state).model_dump_json())
        except Exception as exc:
            # Quota exceeded or storage disabled: the cart keeps working in memory
            logger.warning("Could not persist cart", storage_key=self.key, error=str(exc))

    def clear(self) -> None:
        self._discard()

    def _discard(self) -> None:
        try:
            self.storage.remove(self.key)
        except Exception as exc:
            logger.warning("Could not remove cart record", storage_key=self.key, error=str(exc))
