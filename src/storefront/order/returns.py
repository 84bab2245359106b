"""Returned parcels (retours) — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class MarkRetour:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@storefront.command_handler(part_of=Order)
class RetourHandler:
    @handle(MarkRetour)
    def mark_retour(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_retour(command.reason)
        repo.add(order)
        logger.info(
            "Order marked as retour",
            order_number=order.order_number,
            reason=command.reason,
            fraud_score=order.fraud_score,
        )
