"""Checkout translator — cart plus destination in, CreateOrder command out.

Stateless. Delivery cost comes from the pricing port at submission time and
the total uses the same formula the order engine applies on its side:
sum of line totals plus delivery cost.
"""

import json
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from storefront.cart.state import CartLineItem, CartState
from storefront.delivery.port import DeliveryPricing, DeliveryType
from storefront.order.creation import CreateOrder

logger = structlog.get_logger(__name__)


class DeliveryCostUnresolved(LookupError):
    """The pricing lookup has no answer for this destination yet."""

    def __init__(self, wilaya_id, delivery_type):
        self.wilaya_id = wilaya_id
        self.delivery_type = delivery_type
        super().__init__(f"No delivery cost for wilaya {wilaya_id} ({delivery_type})")


@dataclass(frozen=True)
class Destination:
    """Where and how the customer wants the order delivered."""

    customer_name: str
    customer_phone: str
    wilaya_id: int
    delivery_type: DeliveryType = DeliveryType.DOMICILE
    wilaya_name: str = ""
    commune: str = ""
    address: str = ""
    notes: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "customer_phone", "".join(self.customer_phone.split()))
        object.__setattr__(self, "delivery_type", DeliveryType(self.delivery_type))


def order_line(item: CartLineItem) -> dict:
    line = {
        "product_id": item.product_id,
        "product_name": item.name,
        "product_slug": item.slug,
        "quantity": item.quantity,
        "unit_price": item.price,
        "line_total": item.price * item.quantity,
    }
    if item.variants:
        line["variants"] = dict(item.variants)
    if item.thumbnail:
        line["thumbnail"] = item.thumbnail
    return line


def build_order_request(cart: CartState, destination: Destination, pricing: DeliveryPricing) -> CreateOrder:
    if not cart.items:
        raise ValidationError({"line_items": ["Cannot check out an empty cart"]})

    quote = pricing.get_delivery_cost(destination.wilaya_id, destination.delivery_type)
    if quote is None:
        raise DeliveryCostUnresolved(destination.wilaya_id, destination.delivery_type.value)

    delivery_cost = quote.cost_for(destination.delivery_type)
    lines = [order_line(item) for item in cart.items]
    total_amount = sum(line["line_total"] for line in lines) + delivery_cost

    logger.debug(
        "Order request built",
        line_count=len(lines),
        wilaya_id=destination.wilaya_id,
        delivery_type=destination.delivery_type.value,
        total_amount=total_amount,
    )
    return CreateOrder(
        customer_name=destination.customer_name,
        customer_phone=destination.customer_phone,
        customer_wilaya=destination.wilaya_name or quote.wilaya_name,
        customer_commune=destination.commune,
        customer_address=destination.address,
        notes=destination.notes,
        delivery_type=destination.delivery_type.value,
        delivery_cost=delivery_cost,
        line_items=json.dumps(lines),
        total_amount=total_amount,
    )
