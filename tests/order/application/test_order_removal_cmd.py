"""Application tests for hard deletes and the archive purge."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from storefront.order.order import Order
from storefront.order.removal import PurgeOldArchive, RemoveOrder
from storefront.order.repository import PAGE_SIZE
from storefront.order.status import UpdateOrderStatus


def _age(order_id, days):
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)
    order.created_at = datetime.now(UTC) - timedelta(days=days)
    repo.add(order)


def _set_status(order_id, status):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


class TestRemoveOrder:
    def test_order_gone(self, place_order):
        order_id = place_order()["order_id"]
        current_domain.process(RemoveOrder(order_id=order_id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Order).get(order_id)


class TestPurgeOldArchive:
    def test_only_old_canceled_and_blocked(self, place_order):
        old_canceled = place_order()["order_id"]
        old_blocked = place_order()["order_id"]
        old_shipped = place_order()["order_id"]
        recent_canceled = place_order()["order_id"]
        _set_status(old_canceled, "canceled")
        _set_status(old_blocked, "blocked")
        _set_status(old_shipped, "shipped")
        _set_status(recent_canceled, "canceled")
        for order_id in (old_canceled, old_blocked, old_shipped):
            _age(order_id, 90)

        result = current_domain.process(PurgeOldArchive(), asynchronous=False)

        assert result == {"purged": 2}
        remaining = {str(o.id) for o in current_domain.repository_for(Order).find_all()}
        assert remaining == {old_shipped, recent_canceled}

    def test_custom_retention(self, place_order):
        order_id = place_order()["order_id"]
        _set_status(order_id, "canceled")
        _age(order_id, 10)

        assert current_domain.process(PurgeOldArchive(retention_days=7), asynchronous=False) == {"purged": 1}

    def test_purges_beyond_one_page(self, place_order):
        order_ids = [place_order()["order_id"] for _ in range(PAGE_SIZE + 5)]
        for order_id in order_ids:
            _set_status(order_id, "canceled")
            _age(order_id, 90)

        assert current_domain.process(PurgeOldArchive(), asynchronous=False) == {"purged": PAGE_SIZE + 5}
        assert current_domain.repository_for(Order).find_all() == []
