"""Read-side helpers for the operator dashboard."""

from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus


def order_status_counts() -> dict[str, int]:
    """Order totals per status, plus ``total``."""
    counts = {"total": 0, **{status.value: 0 for status in OrderStatus}}
    for order in current_domain.repository_for(Order).find_all():
        counts["total"] += 1
        counts[order.status] += 1
    return counts


def get_order_by_number(order_number: str) -> Order | None:
    return current_domain.repository_for(Order).get_by_order_number(order_number)
