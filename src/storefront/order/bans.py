"""Customer bans — keyed by phone number.

A ban record is consulted when an order is placed: orders from a banned
phone start out ``blocked``. Banning also blocks the customer's existing
orders; lifting the ban only clears their ``is_banned`` flag.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.events import CustomerBanned, CustomerUnbanned
from storefront.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def normalize_phone(phone: str) -> str:
    return "".join((phone or "").split())


@storefront.aggregate
class BannedCustomer:
    customer_phone = Identifier(identifier=True, required=True)
    reason = String(max_length=500)
    is_active = Boolean(default=True)
    banned_at = DateTime()
    unbanned_at = DateTime()

    def ban(self, reason=None, affected_orders=0):
        now = datetime.now(UTC)
        self.is_active = True
        self.reason = reason
        self.banned_at = now
        self.unbanned_at = None
        self.raise_(
            CustomerBanned(
                customer_phone=str(self.customer_phone),
                reason=reason,
                affected_orders=affected_orders,
                banned_at=now,
            )
        )

    def unban(self, affected_orders=0):
        now = datetime.now(UTC)
        self.is_active = False
        self.unbanned_at = now
        self.raise_(
            CustomerUnbanned(
                customer_phone=str(self.customer_phone),
                affected_orders=affected_orders,
                unbanned_at=now,
            )
        )


def is_banned(phone: str) -> bool:
    """Ban lookup used at order creation."""
    try:
        record = current_domain.repository_for(BannedCustomer).get(normalize_phone(phone))
    except ObjectNotFoundError:
        return False
    return bool(record.is_active)


@storefront.command(part_of="BannedCustomer")
class BanCustomer:
    customer_phone = String(required=True, max_length=20)
    reason = String(max_length=500)


@storefront.command(part_of="BannedCustomer")
class UnbanCustomer:
    customer_phone = String(required=True, max_length=20)


@storefront.command_handler(part_of=BannedCustomer)
class CustomerBanHandler:
    @handle(BanCustomer)
    def ban_customer(self, command):
        phone = normalize_phone(command.customer_phone)
        order_repo = current_domain.repository_for(Order)

        orders = order_repo.find_by_phone(phone)
        for order in orders:
            order.block_for_ban()
            order_repo.add(order)

        repo = current_domain.repository_for(BannedCustomer)
        try:
            record = repo.get(phone)
        except ObjectNotFoundError:
            record = BannedCustomer(customer_phone=phone)
        record.ban(reason=command.reason, affected_orders=len(orders))
        repo.add(record)

        logger.info("Customer banned", customer_phone=phone, affected_orders=len(orders))
        return {"affected_orders": len(orders)}

    @handle(UnbanCustomer)
    def unban_customer(self, command):
        phone = normalize_phone(command.customer_phone)
        order_repo = current_domain.repository_for(Order)

        orders = order_repo.find_by_phone(phone)
        for order in orders:
            order.lift_ban()
            order_repo.add(order)

        repo = current_domain.repository_for(BannedCustomer)
        try:
            record = repo.get(phone)
        except ObjectNotFoundError:
            logger.info("Unban requested for a phone that was never banned", customer_phone=phone)
            return {"affected_orders": len(orders)}

        record.unban(affected_orders=len(orders))
        repo.add(record)

        logger.info(
            "Customer unbanned",
            customer_phone=phone,
            affected_orders=len(orders),
            still_blocked=sum(1 for order in orders if order.status == OrderStatus.BLOCKED.value),
        )
        return {"affected_orders": len(orders)}
