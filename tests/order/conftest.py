import json

import pytest
from protean import current_domain
from storefront.order.creation import CreateOrder

DEFAULT_LINES = [
    {"product_id": "prod-1", "quantity": 2, "unit_price": 2000.0, "variants": {"Size": "M"}},
    {"product_id": "prod-2", "quantity": 1, "unit_price": 1500.0},
]


@pytest.fixture()
def place_order(catalogue):
    """Place an order through the command pipeline and return the handler's result."""

    def _place(**overrides):
        defaults = {
            "customer_name": "Amina Belkacem",
            "customer_phone": "0555123456",
            "customer_wilaya": "Alger",
            "customer_commune": "Bab Ezzouar",
            "delivery_type": "Stopdesk",
            "delivery_cost": 400.0,
            "line_items": json.dumps(DEFAULT_LINES),
            "total_amount": 5900.0,
        }
        defaults.update(overrides)
        return current_domain.process(CreateOrder(**defaults), asynchronous=False)

    return _place
