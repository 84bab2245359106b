"""Delivery pricing port (abstract interface).

Checkout asks for the cost of shipping to a wilaya; the answer carries both
modes and the caller picks the one the customer chose.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class DeliveryType(Enum):
    DOMICILE = "Domicile"
    STOPDESK = "Stopdesk"


@dataclass(frozen=True)
class DeliveryQuote:
    """Cost of delivering to one wilaya, per mode."""

    wilaya_id: int
    wilaya_name: str
    domicile_cost: float
    stopdesk_cost: float
    is_manual_override: bool = False

    def cost_for(self, mode: DeliveryType | str) -> float:
        if DeliveryType(mode) == DeliveryType.DOMICILE:
            return self.domicile_cost
        return self.stopdesk_cost


class DeliveryPricing(ABC):
    """Abstract delivery pricing interface."""

    @abstractmethod
    def get_delivery_cost(self, wilaya_id: int, mode: DeliveryType | str) -> DeliveryQuote | None:
        """Return the quote for a wilaya, or None when it cannot be resolved."""
        ...
