"""Domain events for the Order aggregate.

All events are versioned, immutable facts raised alongside the state change
they describe. The order record itself stays the source of truth; events
let other parts of the shop (notifications, dashboards) react.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer submitted an order from checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_phone = String(required=True)
    status = String(required=True)  # "new", or "blocked" for banned customers
    line_items = Text(required=True)  # JSON: list of line dicts
    delivery_type = String(required=True)
    delivery_cost = Float(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An operator moved an order to another status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    reason = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class CallOutcomeLogged:
    """A confirmation call was made and its outcome recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    outcome = String(required=True)
    note = String()
    call_attempts = Integer(required=True)
    called_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderAutoCanceled:
    """The call-outcome policy canceled the order without operator action."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String(required=True)
    canceled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderLineItemsUpdated:
    """An operator replaced the order's line items."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    line_items = Text(required=True)  # JSON: list of line dicts
    previous_total = Float(required=True)
    new_total = Float(required=True)


@storefront.event(part_of="Order")
class OrderDeliveryUpdated:
    """An operator changed where or how the order is delivered."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    wilaya = String(required=True)
    commune = String()
    delivery_type = String(required=True)
    delivery_cost = Float(required=True)
    previous_total = Float(required=True)
    new_total = Float(required=True)


@storefront.event(part_of="BannedCustomer")
class CustomerBanned:
    """Orders from this phone number will be blocked from now on."""

    __version__ = 1

    customer_phone = String(required=True)
    reason = String()
    affected_orders = Integer(default=0)
    banned_at = DateTime(required=True)


@storefront.event(part_of="BannedCustomer")
class CustomerUnbanned:
    """A previously banned phone number may order again."""

    __version__ = 1

    customer_phone = String(required=True)
    affected_orders = Integer(default=0)
    unbanned_at = DateTime(required=True)
