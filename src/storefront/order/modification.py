"""Order modification — operator edits to lines, delivery, contact details and notes."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateLineItems:
    order_id = Identifier(required=True)
    line_items = Text(required=True)  # JSON: list of line dicts
    admin_name = String(max_length=255)


@storefront.command(part_of="Order")
class UpdateDeliveryDestination:
    order_id = Identifier(required=True)
    wilaya = String(required=True, max_length=100)
    commune = String(max_length=100)
    delivery_type = String(required=True, max_length=20)
    delivery_cost = Float(required=True, min_value=0.0)
    admin_name = String(max_length=255)


@storefront.command(part_of="Order")
class UpdateCustomerInfo:
    order_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_phone = String(max_length=20)
    customer_wilaya = String(max_length=100)
    customer_commune = String(max_length=100)
    customer_address = String(max_length=500)
    notes = Text()


@storefront.command(part_of="Order")
class AddAdminNote:
    order_id = Identifier(required=True)
    text = Text(required=True)


@storefront.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(UpdateLineItems)
    def update_line_items(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        line_items = json.loads(command.line_items) if isinstance(command.line_items, str) else command.line_items
        new_total = order.replace_line_items(line_items, admin_name=command.admin_name)
        repo.add(order)

        logger.info(
            "Order line items updated",
            order_number=order.order_number,
            line_count=len(line_items),
            total_amount=new_total,
        )
        return {"total_amount": new_total}

    @handle(UpdateDeliveryDestination)
    def update_delivery_destination(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        new_total = order.update_delivery(
            wilaya=command.wilaya,
            commune=command.commune,
            delivery_type=command.delivery_type,
            delivery_cost=command.delivery_cost,
            admin_name=command.admin_name,
        )
        repo.add(order)

        logger.info(
            "Order delivery updated",
            order_number=order.order_number,
            wilaya=command.wilaya,
            delivery_type=command.delivery_type,
            total_amount=new_total,
        )
        return {"total_amount": new_total}

    @handle(UpdateCustomerInfo)
    def update_customer_info(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_customer_info(
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
            customer_wilaya=command.customer_wilaya,
            customer_commune=command.customer_commune,
            customer_address=command.customer_address,
            notes=command.notes,
        )
        repo.add(order)

    @handle(AddAdminNote)
    def add_admin_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.add_note(command.text)
        repo.add(order)
