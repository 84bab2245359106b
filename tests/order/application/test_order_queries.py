"""Tests for the dashboard read helpers."""

from protean import current_domain
from storefront.order.bans import BanCustomer
from storefront.order.order import Order
from storefront.order.queries import get_order_by_number, order_status_counts
from storefront.order.repository import PAGE_SIZE
from storefront.order.status import UpdateOrderStatus


class TestOrderStatusCounts:
    def test_empty(self):
        assert order_status_counts() == {
            "total": 0,
            "new": 0,
            "confirmed": 0,
            "packaged": 0,
            "shipped": 0,
            "canceled": 0,
            "blocked": 0,
        }

    def test_counts_per_status(self, place_order):
        place_order()
        place_order()
        confirmed = place_order()["order_id"]
        current_domain.process(UpdateOrderStatus(order_id=confirmed, status="confirmed"), asynchronous=False)

        counts = order_status_counts()
        assert counts["total"] == 3
        assert counts["new"] == 2
        assert counts["confirmed"] == 1


class TestGetOrderByNumber:
    def test_found(self, place_order):
        result = place_order()
        order = get_order_by_number(result["order_number"])
        assert str(order.id) == result["order_id"]

    def test_missing(self):
        assert get_order_by_number("GAY-000000-ZZZZ") is None


class TestBeyondOnePage:
    def test_counts_every_order(self, place_order):
        for _ in range(PAGE_SIZE + 5):
            place_order()

        counts = order_status_counts()
        assert counts["total"] == PAGE_SIZE + 5
        assert counts["new"] == PAGE_SIZE + 5

    def test_finders_return_every_match(self, place_order):
        for _ in range(PAGE_SIZE + 5):
            place_order()
        place_order(customer_phone="0661000000")

        repo = current_domain.repository_for(Order)
        orders = repo.find_by_phone("0555123456")
        assert len(orders) == PAGE_SIZE + 5
        assert len({str(order.id) for order in orders}) == PAGE_SIZE + 5
        assert len(repo.find_by_status("new")) == PAGE_SIZE + 6

    def test_ban_blocks_every_order(self, place_order):
        for _ in range(PAGE_SIZE + 5):
            place_order()

        result = current_domain.process(BanCustomer(customer_phone="0555123456"), asynchronous=False)

        assert result == {"affected_orders": PAGE_SIZE + 5}
        assert order_status_counts()["blocked"] == PAGE_SIZE + 5
