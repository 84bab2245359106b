"""Order creation — command and handler.

The handler is the authority on what an order costs: names, slugs and
missing prices come from the catalogue, and totals are recomputed rather
than taken from the request.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue import get_catalogue
from storefront.domain import storefront
from storefront.order.bans import is_banned, normalize_phone
from storefront.order.exceptions import OrderNumberExhausted, ProductNotFound
from storefront.order.numbering import ORDER_NUMBER_ATTEMPTS, generate_order_number
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CreateOrder:
    customer_name = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=20)
    customer_wilaya = String(required=True, max_length=100)
    customer_commune = String(max_length=100)
    customer_address = String(max_length=500)
    notes = Text()
    delivery_type = String(required=True, max_length=20)
    delivery_cost = Float(required=True, min_value=0.0)
    line_items = Text(required=True)  # JSON: list of line dicts
    total_amount = Float()  # caller's figure, informational only


def allocate_order_number(repo) -> str:
    """Draw candidates until one is free, at most ORDER_NUMBER_ATTEMPTS times."""
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        candidate = generate_order_number()
        if not repo.order_number_exists(candidate):
            return candidate
        logger.warning("Order number collision", order_number=candidate, attempt=attempt)
    raise OrderNumberExhausted(ORDER_NUMBER_ATTEMPTS)


def resolve_line_items(requested, catalogue) -> list[dict]:
    """Fill each requested line from the catalogue; unknown products are fatal."""
    resolved = []
    for line in requested:
        product = catalogue.get_product(line["product_id"])
        if product is None:
            raise ProductNotFound(line["product_id"])

        unit_price = line.get("unit_price")
        resolved.append(
            {
                "product_id": product.product_id,
                "product_name": line.get("product_name") or product.name,
                "product_slug": line.get("product_slug") or product.slug,
                "quantity": line.get("quantity", 1),
                "unit_price": product.price if unit_price is None else unit_price,
                "variants": line.get("variants") or {},
                "thumbnail": line.get("thumbnail") or product.thumbnail,
            }
        )
    return resolved


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        requested = json.loads(command.line_items) if isinstance(command.line_items, str) else command.line_items
        line_items = resolve_line_items(requested, get_catalogue())

        phone = normalize_phone(command.customer_phone)
        banned = is_banned(phone)

        repo = current_domain.repository_for(Order)
        order_number = allocate_order_number(repo)

        order = Order.create(
            order_number=order_number,
            customer_name=command.customer_name,
            customer_phone=phone,
            customer_wilaya=command.customer_wilaya,
            customer_commune=command.customer_commune,
            customer_address=command.customer_address,
            notes=command.notes,
            line_items_data=line_items,
            delivery_type=command.delivery_type,
            delivery_cost=command.delivery_cost,
            banned=banned,
        )
        repo.add(order)

        if command.total_amount is not None and round(command.total_amount, 2) != order.total_amount:
            logger.warning(
                "Submitted total differs from recomputed total",
                order_number=order_number,
                submitted=command.total_amount,
                recomputed=order.total_amount,
            )
        logger.info(
            "Order placed",
            order_number=order_number,
            status=order.status,
            total_amount=order.total_amount,
            line_count=len(line_items),
        )
        return {
            "order_id": str(order.id),
            "order_number": order_number,
            "total_amount": order.total_amount,
        }
