"""Application tests for operator edits."""

import json

from protean import current_domain
from storefront.order.modification import (
    AddAdminNote,
    UpdateCustomerInfo,
    UpdateDeliveryDestination,
    UpdateLineItems,
)
from storefront.order.order import Order


def _get(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestUpdateLineItems:
    def test_total_recomputed_and_logged(self, place_order):
        order_id = place_order()["order_id"]
        result = current_domain.process(
            UpdateLineItems(
                order_id=order_id,
                line_items=json.dumps(
                    [{"product_id": "prod-3", "product_name": "Caftan Brodé", "quantity": 2, "unit_price": 4500.0}]
                ),
                admin_name="Yacine",
            ),
            asynchronous=False,
        )

        assert result == {"total_amount": 9400.0}
        order = _get(order_id)
        assert order.total_amount == 9400.0
        assert len(order.line_items) == 1
        assert order.change_log[0].admin_name == "Yacine"


class TestUpdateDeliveryDestination:
    def test_total_follows_new_cost(self, place_order):
        order_id = place_order()["order_id"]
        result = current_domain.process(
            UpdateDeliveryDestination(
                order_id=order_id,
                wilaya="Oran",
                commune="Es Senia",
                delivery_type="Domicile",
                delivery_cost=600.0,
            ),
            asynchronous=False,
        )

        assert result == {"total_amount": 6100.0}
        order = _get(order_id)
        assert (order.customer_wilaya, order.customer_commune) == ("Oran", "Es Senia")
        assert order.delivery_type == "Domicile"


class TestUpdateCustomerInfo:
    def test_only_given_fields_change(self, place_order):
        order_id = place_order()["order_id"]
        current_domain.process(
            UpdateCustomerInfo(order_id=order_id, customer_name="Amina B."), asynchronous=False
        )

        order = _get(order_id)
        assert order.customer_name == "Amina B."
        assert order.customer_phone == "0555123456"


class TestAddAdminNote:
    def test_note_appended(self, place_order):
        order_id = place_order()["order_id"]
        current_domain.process(AddAdminNote(order_id=order_id, text="Call after 18h"), asynchronous=False)
        assert [n.text for n in _get(order_id).admin_notes] == ["Call after 18h"]
