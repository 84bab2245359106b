"""Order removal — administrative hard delete and the archive purge."""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)

ARCHIVE_RETENTION_DAYS = 60

_ARCHIVED_STATUSES = (OrderStatus.CANCELED, OrderStatus.BLOCKED)


@storefront.command(part_of="Order")
class RemoveOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class PurgeOldArchive:
    retention_days = Integer(default=ARCHIVE_RETENTION_DAYS, min_value=0)


@storefront.command_handler(part_of=Order)
class OrderRemovalHandler:
    @handle(RemoveOrder)
    def remove_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        repo._dao.delete(order)
        logger.info("Order removed", order_number=order.order_number, status=order.status)

    @handle(PurgeOldArchive)
    def purge_old_archive(self, command):
        """Hard-delete canceled and blocked orders created before the retention cutoff."""
        retention_days = ARCHIVE_RETENTION_DAYS if command.retention_days is None else command.retention_days
        cutoff = datetime.now(UTC) - timedelta(days=retention_days)
        repo = current_domain.repository_for(Order)

        purged = 0
        for status in _ARCHIVED_STATUSES:
            for order in repo.find_by_status(status.value):
                if order.created_at is not None and order.created_at < cutoff:
                    repo._dao.delete(order)
                    purged += 1

        logger.info("Archive purged", purged=purged, retention_days=retention_days)
        return {"purged": purged}
