"""Cart store — the shopper's authoritative in-memory cart.

One store per session. Each mutation dispatches an action through the
reducer, swaps in the resulting snapshot and writes it through to the
injected persistence adapter. Persistence failures are absorbed by the
adapter, so a mutation never fails because storage did.
"""

from dataclasses import dataclass

import structlog

from storefront.cart.actions import AddItem, ClearCart, Hydrate, RemoveItem, UpdateQuantity, reduce
from storefront.cart.persistence import CartPersistence
from storefront.cart.state import CART_MAX_ITEMS, EMPTY_CART, CartLineItem, CartState

logger = structlog.get_logger(__name__)

CART_FULL_MESSAGE = f"Your cart is full (max {CART_MAX_ITEMS} items). Remove an item to add a new one."
INVALID_QUANTITY_MESSAGE = "Quantity must be a whole number of at least 1."


@dataclass(frozen=True)
class AddToCartResult:
    """Outcome of an add. Failures are expected and carry a displayable message."""

    success: bool
    error: str | None = None


class CartStore:
    def __init__(self, persistence: CartPersistence):
        self.persistence = persistence
        self._state = EMPTY_CART

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def hydrate(self, state: CartState) -> None:
        """Replace the in-memory cart wholesale. Does not write back."""
        self._state = reduce(self._state, Hydrate(state=state))

    def load(self) -> CartState:
        """Hydrate from persistence once at startup."""
        stored = self.persistence.read()
        if stored.items:
            self.hydrate(stored)
            logger.debug("Cart hydrated from storage", item_count=len(stored.items))
        return self._state

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(
        self,
        product_id: str,
        variants: dict | None,
        unit_price: float,
        quantity: int = 1,
        *,
        name: str,
        slug: str = "",
        thumbnail: str | None = None,
    ) -> AddToCartResult:
        variants = dict(variants or {})

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            logger.info("Invalid quantity, item rejected", product_id=product_id, quantity=quantity)
            return AddToCartResult(success=False, error=INVALID_QUANTITY_MESSAGE)

        if self._state.find(product_id, variants) is None and self._state.is_full:
            logger.info("Cart full, item rejected", product_id=product_id, max_items=CART_MAX_ITEMS)
            return AddToCartResult(success=False, error=CART_FULL_MESSAGE)

        self._dispatch(
            AddItem(
                product_id=product_id,
                name=name,
                price=unit_price,
                quantity=quantity,
                slug=slug,
                thumbnail=thumbnail,
                variants=variants,
            )
        )
        return AddToCartResult(success=True)

    def remove_item(self, cart_item_id: str) -> None:
        self._dispatch(RemoveItem(cart_item_id=cart_item_id))

    def update_quantity(self, cart_item_id: str, quantity: int) -> None:
        self._dispatch(UpdateQuantity(cart_item_id=cart_item_id, quantity=quantity))

    def clear(self) -> None:
        self._state = reduce(self._state, ClearCart())
        self.persistence.clear()

    def _dispatch(self, action) -> None:
        self._state = reduce(self._state, action)
        self.persistence.write(self._state)

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self._state.items

    @property
    def item_count(self) -> int:
        """Unique line items, not units."""
        return len(self._state.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self._state.items)

    @property
    def subtotal(self) -> float:
        return sum(item.line_total for item in self._state.items)
