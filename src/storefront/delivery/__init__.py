"""Delivery pricing adapter — pluggable cost lookup per wilaya and mode."""

import os

_pricing_instance = None


def get_delivery_pricing():
    """Return the configured delivery pricing adapter (singleton).

    Uses StaticDeliveryPricing by default. Configure via the
    DELIVERY_PRICING_ADAPTER environment variable.
    """
    global _pricing_instance
    if _pricing_instance is None:
        adapter = os.environ.get("DELIVERY_PRICING_ADAPTER", "static")
        if adapter == "static":
            from storefront.delivery.static_adapter import StaticDeliveryPricing

            _pricing_instance = StaticDeliveryPricing()
        else:
            raise ValueError(f"Unknown delivery pricing adapter: {adapter}")
    return _pricing_instance


def reset_delivery_pricing():
    """Reset the pricing singleton (useful for testing)."""
    global _pricing_instance
    _pricing_instance = None
