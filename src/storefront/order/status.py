"""Manual status changes — single and bulk operator actions."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)

BULK_CONFIRM_REASON = "Bulk confirmed"
BULK_CANCEL_REASON = "Bulk canceled by admin"


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    reason = String(max_length=500)


@storefront.command(part_of="Order")
class UnblockOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class BulkConfirm:
    order_ids = Text(required=True)  # JSON: list of order ids


@storefront.command(part_of="Order")
class BulkCancel:
    order_ids = Text(required=True)  # JSON: list of order ids
    reason = String(max_length=500)


def _ids(value):
    return json.loads(value) if isinstance(value, str) else list(value)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        order.update_status(command.status, reason=command.reason)
        repo.add(order)
        logger.info(
            "Order status updated",
            order_number=order.order_number,
            previous_status=previous,
            status=order.status,
        )

    @handle(UnblockOrder)
    def unblock(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.unblock()
        repo.add(order)
        logger.info("Order unblocked", order_number=order.order_number)

    @handle(BulkConfirm)
    def bulk_confirm(self, command):
        """Confirm every ``new`` order; anything else counts as failed."""
        repo = current_domain.repository_for(Order)
        results = {"success": 0, "failed": 0}

        for order_id in _ids(command.order_ids):
            try:
                order = repo.get(order_id)
            except ObjectNotFoundError:
                results["failed"] += 1
                continue

            if order.status != OrderStatus.NEW.value:
                results["failed"] += 1
                continue

            order.update_status(OrderStatus.CONFIRMED.value, reason=BULK_CONFIRM_REASON)
            repo.add(order)
            results["success"] += 1

        logger.info("Bulk confirm finished", **results)
        return results

    @handle(BulkCancel)
    def bulk_cancel(self, command):
        """Cancel in bulk. Already canceled or blocked orders are skipped; shipped ones fail."""
        repo = current_domain.repository_for(Order)
        reason = command.reason or BULK_CANCEL_REASON
        results = {"success": 0, "failed": 0, "skipped": 0}

        for order_id in _ids(command.order_ids):
            try:
                order = repo.get(order_id)
            except ObjectNotFoundError:
                results["failed"] += 1
                continue

            status = OrderStatus(order.status)
            if status in (OrderStatus.CANCELED, OrderStatus.BLOCKED):
                results["skipped"] += 1
                continue
            if status == OrderStatus.SHIPPED:
                results["failed"] += 1
                continue

            order.update_status(OrderStatus.CANCELED.value, reason=reason)
            repo.add(order)
            results["success"] += 1

        logger.info("Bulk cancel finished", reason=reason, **results)
        return results
