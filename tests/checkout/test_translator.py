"""Tests for turning a cart into a CreateOrder request."""

import json

import pytest
from protean.exceptions import ValidationError
from storefront.cart.state import EMPTY_CART, CartLineItem, CartState
from storefront.checkout.translator import DeliveryCostUnresolved, Destination, build_order_request
from storefront.delivery.port import DeliveryPricing, DeliveryType
from storefront.delivery.static_adapter import StaticDeliveryPricing
from storefront.order.creation import CreateOrder


class UnresolvedPricing(DeliveryPricing):
    def get_delivery_cost(self, wilaya_id, mode):
        return None


def _cart():
    return CartState(
        items=(
            CartLineItem(
                cart_item_id="ci_1",
                product_id="prod-1",
                name="Robe Kabyle",
                price=2000.0,
                quantity=2,
                slug="robe-kabyle",
                thumbnail="robe.jpg",
                variants={"Size": "M"},
            ),
            CartLineItem(
                cart_item_id="ci_2",
                product_id="prod-2",
                name="Foulard Soie",
                price=1500.0,
                quantity=1,
                slug="foulard-soie",
            ),
        ),
        updated_at=1,
    )


def _destination(**overrides):
    defaults = {
        "customer_name": "Amina Belkacem",
        "customer_phone": "0555 12 34 56",
        "wilaya_id": 16,
        "wilaya_name": "Alger",
        "delivery_type": DeliveryType.STOPDESK,
    }
    defaults.update(overrides)
    return Destination(**defaults)


class TestBuildOrderRequest:
    def test_returns_create_order_command(self):
        command = build_order_request(_cart(), _destination(), StaticDeliveryPricing())
        assert isinstance(command, CreateOrder)

    def test_total_is_lines_plus_delivery(self):
        # Alger stop-desk delivery costs 400
        command = build_order_request(_cart(), _destination(), StaticDeliveryPricing())
        assert command.delivery_cost == 400.0
        assert command.total_amount == 5900.0

    def test_home_delivery_uses_domicile_cost(self):
        command = build_order_request(
            _cart(),
            _destination(wilaya_id=31, wilaya_name="Oran", delivery_type="Domicile", commune="Bir El Djir"),
            StaticDeliveryPricing(),
        )
        assert command.delivery_cost == 600.0
        assert command.total_amount == 6100.0

    def test_one_line_per_cart_item(self):
        command = build_order_request(_cart(), _destination(), StaticDeliveryPricing())
        lines = json.loads(command.line_items)
        assert lines[0] == {
            "product_id": "prod-1",
            "product_name": "Robe Kabyle",
            "product_slug": "robe-kabyle",
            "quantity": 2,
            "unit_price": 2000.0,
            "line_total": 4000.0,
            "variants": {"Size": "M"},
            "thumbnail": "robe.jpg",
        }

    def test_empty_variants_are_omitted(self):
        command = build_order_request(_cart(), _destination(), StaticDeliveryPricing())
        assert "variants" not in json.loads(command.line_items)[1]

    def test_phone_whitespace_removed(self):
        command = build_order_request(_cart(), _destination(), StaticDeliveryPricing())
        assert command.customer_phone == "0555123456"

    def test_wilaya_name_falls_back_to_quote(self):
        command = build_order_request(_cart(), _destination(wilaya_name=""), StaticDeliveryPricing())
        assert command.customer_wilaya == "Alger"

    def test_unresolved_delivery_cost_refuses_submission(self):
        with pytest.raises(DeliveryCostUnresolved):
            build_order_request(_cart(), _destination(), UnresolvedPricing())

    def test_unknown_wilaya_is_unresolved(self):
        with pytest.raises(DeliveryCostUnresolved):
            build_order_request(_cart(), _destination(wilaya_id=99), StaticDeliveryPricing())

    def test_empty_cart_refused(self):
        with pytest.raises(ValidationError):
            build_order_request(EMPTY_CART, _destination(), StaticDeliveryPricing())

    def test_manual_override_is_used(self):
        pricing = StaticDeliveryPricing()
        pricing.set_override(16, domicile_cost=550.0, stopdesk_cost=350.0)
        command = build_order_request(_cart(), _destination(), pricing)
        assert command.delivery_cost == 350.0
