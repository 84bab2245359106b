"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.order.events import (
    CallOutcomeLogged,
    OrderAutoCanceled,
    OrderDeliveryUpdated,
    OrderLineItemsUpdated,
    OrderPlaced,
    OrderStatusChanged,
)
from storefront.order.order import Order

_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "CallOutcomeLogged": CallOutcomeLogged,
    "OrderAutoCanceled": OrderAutoCanceled,
    "OrderLineItemsUpdated": OrderLineItemsUpdated,
    "OrderDeliveryUpdated": OrderDeliveryUpdated,
}


def _new_order(banned=False):
    return Order.create(
        order_number="GAY-123456-TEST",
        customer_name="Amina Belkacem",
        customer_phone="0555123456",
        customer_wilaya="Alger",
        line_items_data=[
            {"product_id": "prod-1", "product_name": "Robe Kabyle", "quantity": 2, "unit_price": 2000.0},
            {"product_id": "prod-2", "product_name": "Foulard Soie", "quantity": 1, "unit_price": 1500.0},
        ],
        delivery_type="Stopdesk",
        delivery_cost=400.0,
        banned=banned,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def call_results():
    return []


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a new order", target_fixture="order")
def new_order():
    order = _new_order()
    order._events.clear()
    return order


@given("a new order from a banned customer", target_fixture="order")
def banned_order():
    order = _new_order(banned=True)
    order._events.clear()
    return order


@given(parsers.cfparse('the order is moved to "{status}"'))
def order_moved_to(order, status):
    order.update_status(status)
    order._events.clear()


@given(parsers.cfparse('a "{outcome}" call was logged'))
def call_was_logged(order, outcome):
    order.log_call_outcome(outcome)
    order._events.clear()


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the cancel reason is "{reason}"'))
def cancel_reason_is(order, reason):
    assert order.cancel_reason == reason


@then(parsers.cfparse("the status history has {count:d} entries"))
def history_length(order, count):
    assert len(order.status_history) == count


@then(parsers.cfparse('the latest history entry is "{status}" with reason "{reason}"'))
def latest_history_entry(order, status, reason):
    latest = order.timeline[-1]
    assert (latest.status, latest.reason) == (status, reason)


@then(parsers.cfparse("the order total is {total:g}"))
def order_total_is(order, total):
    assert order.total_amount == total


@then(parsers.cfparse("the call attempts count is {count:d}"))
def call_attempts_is(order, count):
    assert order.call_attempts == count


@then(parsers.cfparse("a {event_type} event is raised"))
def generic_event_raised(order, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then(parsers.cfparse("no {event_type} event is raised"))
def generic_event_not_raised(order, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert not any(isinstance(e, event_cls) for e in order._events)
