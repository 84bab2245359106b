"""Cart actions and the reducer that applies them.

Every cart mutation is one of the tagged actions below. ``reduce`` is the
only place where the merge, cap and zero-quantity rules live: it takes the
current snapshot and an action and returns the next snapshot, leaving the
input untouched.
"""

from dataclasses import dataclass, field

from storefront.cart.state import (
    CART_MAX_ITEMS,
    CartLineItem,
    CartState,
    generate_cart_item_id,
    now_ms,
)


@dataclass(frozen=True)
class AddItem:
    product_id: str
    name: str
    price: float
    quantity: int = 1
    slug: str = ""
    thumbnail: str | None = None
    variants: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RemoveItem:
    cart_item_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    cart_item_id: str
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class Hydrate:
    state: CartState


def _add_item(state: CartState, action: AddItem) -> CartState:
    if action.quantity < 1:
        return state

    existing = state.find(action.product_id, action.variants)
    if existing is not None:
        # Same identity: bump the quantity, never split the line
        items = tuple(
            item.with_quantity(item.quantity + action.quantity) if item is existing else item for item in state.items
        )
        return CartState(items=items, updated_at=now_ms())

    # Second guard behind CartStore.add_item
    if len(state.items) >= CART_MAX_ITEMS:
        return state

    item = CartLineItem(
        cart_item_id=generate_cart_item_id(),
        product_id=action.product_id,
        name=action.name,
        price=action.price,
        quantity=action.quantity,
        slug=action.slug,
        thumbnail=action.thumbnail,
        variants=action.variants,
    )
    return CartState(items=state.items + (item,), updated_at=now_ms())


def _remove_item(state: CartState, action: RemoveItem) -> CartState:
    items = tuple(item for item in state.items if item.cart_item_id != action.cart_item_id)
    return CartState(items=items, updated_at=now_ms())


def _update_quantity(state: CartState, action: UpdateQuantity) -> CartState:
    if action.quantity <= 0:
        return _remove_item(state, RemoveItem(cart_item_id=action.cart_item_id))

    items = tuple(
        item.with_quantity(action.quantity) if item.cart_item_id == action.cart_item_id else item
        for item in state.items
    )
    return CartState(items=items, updated_at=now_ms())


def _clear(state: CartState, action: ClearCart) -> CartState:  # noqa: ARG001
    return CartState(items=(), updated_at=now_ms())


def _hydrate(state: CartState, action: Hydrate) -> CartState:  # noqa: ARG001
    return action.state


_REDUCERS = {
    AddItem: _add_item,
    RemoveItem: _remove_item,
    UpdateQuantity: _update_quantity,
    ClearCart: _clear,
    Hydrate: _hydrate,
}


def reduce(state: CartState, action) -> CartState:
    """Apply one action to a snapshot and return the next snapshot."""
    try:
        handler = _REDUCERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown cart action: {type(action).__name__}") from None
    return handler(state, action)
