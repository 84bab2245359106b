"""Tests for operator edits: line items, delivery, contact details and notes."""

import pytest
from protean.exceptions import ValidationError
from storefront.order.events import OrderDeliveryUpdated, OrderLineItemsUpdated
from storefront.order.order import Order


def _make_order():
    return Order.create(
        order_number="GAY-000003-CCCC",
        customer_name="Amina",
        customer_phone="0555123456",
        customer_wilaya="Alger",
        customer_commune="Bab Ezzouar",
        line_items_data=[
            {"product_id": "prod-1", "product_name": "Robe", "quantity": 2, "unit_price": 2000.0},
            {"product_id": "prod-2", "product_name": "Foulard", "quantity": 1, "unit_price": 1500.0},
        ],
        delivery_type="Stopdesk",
        delivery_cost=400.0,
    )


class TestReplaceLineItems:
    def test_totals_recomputed(self):
        order = _make_order()
        new_total = order.replace_line_items(
            [{"product_id": "prod-3", "product_name": "Caftan", "quantity": 1, "unit_price": 4500.0}]
        )
        assert new_total == 4900.0
        assert order.total_amount == 4900.0
        assert [line.product_id for line in order.lines] == ["prod-3"]

    def test_change_log_summary(self):
        order = _make_order()
        order.replace_line_items(
            [{"product_id": "prod-1", "product_name": "Robe", "quantity": 1, "unit_price": 2000.0}],
            admin_name="Yacine",
        )
        entry = order.change_log[0]
        assert entry.action == "line_items_updated"
        assert entry.admin_name == "Yacine"
        assert entry.changes == "Items: 2 → 1, Subtotal: 5500 DA → 2000 DA, Total: 5900 DA → 2400 DA"

    def test_status_history_untouched(self):
        order = _make_order()
        order.replace_line_items([{"product_id": "p", "product_name": "P", "quantity": 1, "unit_price": 1.0}])
        assert len(order.timeline) == 1

    def test_at_least_one_line(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.replace_line_items([])
        assert order.total_amount == 5900.0

    def test_raises_event(self):
        order = _make_order()
        order.replace_line_items([{"product_id": "p", "product_name": "P", "quantity": 3, "unit_price": 100.0}])
        event = next(e for e in order._events if isinstance(e, OrderLineItemsUpdated))
        assert (event.previous_total, event.new_total) == (5900.0, 700.0)


class TestUpdateDelivery:
    def test_total_follows_cost(self):
        order = _make_order()
        new_total = order.update_delivery("Oran", "Bir El Djir", "Domicile", 600.0, admin_name="Yacine")
        assert new_total == 6100.0
        assert order.customer_wilaya == "Oran"
        assert order.delivery_type == "Domicile"
        assert order.delivery_cost == 600.0

    def test_change_log_summary(self):
        order = _make_order()
        order.update_delivery("Oran", "Bir El Djir", "Domicile", 600.0)
        assert order.change_log[0].action == "delivery_updated"
        assert order.change_log[0].changes == (
            "Destination: Alger, Bab Ezzouar → Oran, Bir El Djir, "
            "Type: Stopdesk → Domicile, Cost: 400 DA → 600 DA, Total: 5900 DA → 6100 DA"
        )

    def test_raises_event(self):
        order = _make_order()
        order.update_delivery("Oran", "", "Stopdesk", 450.0)
        event = next(e for e in order._events if isinstance(e, OrderDeliveryUpdated))
        assert event.new_total == 5950.0


class TestCustomerInfo:
    def test_patch_only_given_fields(self):
        order = _make_order()
        order.update_customer_info(customer_phone="0666 11 22 33", customer_address="Rue Didouche")
        assert order.customer_phone == "0666112233"
        assert order.customer_address == "Rue Didouche"
        assert order.customer_name == "Amina"


class TestNotes:
    def test_add_note(self):
        order = _make_order()
        order.add_note("Customer prefers evening calls")
        order.add_note("Second note")
        assert [n.text for n in sorted(order.admin_notes, key=lambda n: n.position)] == [
            "Customer prefers evening calls",
            "Second note",
        ]

    def test_blank_note_rejected(self):
        with pytest.raises(ValidationError):
            _make_order().add_note("   ")
