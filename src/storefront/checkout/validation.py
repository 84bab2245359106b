"""Cart re-validation against the live catalogue before checkout.

Cart lines carry a snapshot taken when the product was added. By checkout
the product may be gone, deactivated, repriced or have lost the chosen
variant. Repriced lines stay in the cart at the new price; the others are
removed.
"""

from dataclasses import dataclass, replace
from enum import Enum

from storefront.cart.state import CartLineItem, format_variants
from storefront.catalogue.port import ProductCatalogue, ProductInfo


class ConflictType(Enum):
    PRODUCT_DELETED = "product_deleted"
    INACTIVE = "inactive"
    PRICE_CHANGE = "price_change"
    DISABLED_VARIANT = "disabled_variant"


class SuggestedAction(Enum):
    REMOVE = "remove"
    UPDATE_PRICE = "update_price"


@dataclass(frozen=True)
class CartConflict:
    type: ConflictType
    item: CartLineItem
    message: str
    suggested_action: SuggestedAction
    old_price: float | None = None
    new_price: float | None = None


@dataclass(frozen=True)
class CartValidationResult:
    conflicts: tuple[CartConflict, ...]
    valid_items: tuple[CartLineItem, ...]

    @property
    def is_valid(self) -> bool:
        return not self.conflicts


def _has_unavailable_variant(item: CartLineItem, product: ProductInfo) -> bool:
    for group_name, label in item.variants.items():
        group = product.variant_group(group_name)
        if group is None:
            return True
        value = group.find(label)
        if value is None or not value.enabled:
            return True
    return False


def validate_cart(items, catalogue: ProductCatalogue) -> CartValidationResult:
    conflicts = []
    valid_items = []

    for item in items:
        product = catalogue.get_product(item.product_id)

        if product is None:
            conflicts.append(
                CartConflict(
                    type=ConflictType.PRODUCT_DELETED,
                    item=item,
                    message=f'"{item.name}" is no longer available',
                    suggested_action=SuggestedAction.REMOVE,
                )
            )
            continue

        if not product.is_active:
            conflicts.append(
                CartConflict(
                    type=ConflictType.INACTIVE,
                    item=item,
                    message=f'"{item.name}" is currently {product.status.lower()}',
                    suggested_action=SuggestedAction.REMOVE,
                )
            )
            continue

        if product.price != item.price:
            conflicts.append(
                CartConflict(
                    type=ConflictType.PRICE_CHANGE,
                    item=item,
                    message=f'Price changed for "{item.name}"',
                    suggested_action=SuggestedAction.UPDATE_PRICE,
                    old_price=item.price,
                    new_price=product.price,
                )
            )
            valid_items.append(replace(item, price=product.price))
            continue

        if product.variant_groups and _has_unavailable_variant(item, product):
            conflicts.append(
                CartConflict(
                    type=ConflictType.DISABLED_VARIANT,
                    item=item,
                    message=f'"{item.name}" is no longer available in {format_variants(dict(item.variants))}',
                    suggested_action=SuggestedAction.REMOVE,
                )
            )
            continue

        valid_items.append(item)

    return CartValidationResult(conflicts=tuple(conflicts), valid_items=tuple(valid_items))


def resolve_conflicts(items, conflicts) -> tuple[CartLineItem, ...]:
    """Drop lines that must go and reprice the ones that changed."""
    by_key = {conflict.item.key: conflict for conflict in conflicts}
    resolved = []
    for item in items:
        conflict = by_key.get(item.key)
        if conflict is None:
            resolved.append(item)
        elif conflict.suggested_action == SuggestedAction.UPDATE_PRICE:
            resolved.append(replace(item, price=conflict.new_price))
    return tuple(resolved)


def conflict_summary(conflicts) -> str:
    """e.g. ``2 items unavailable and 1 price change``."""
    removed = sum(1 for c in conflicts if c.suggested_action == SuggestedAction.REMOVE)
    price_changes = sum(1 for c in conflicts if c.suggested_action == SuggestedAction.UPDATE_PRICE)

    parts = []
    if removed:
        parts.append(f"{removed} item{'s' if removed > 1 else ''} unavailable")
    if price_changes:
        parts.append(f"{price_changes} price change{'s' if price_changes > 1 else ''}")
    return " and ".join(parts)
