"""Order aggregate (CQRS) — a cash-on-delivery order and its confirmation workflow.

Orders are stored as current state. Every status move appends to
``status_history`` and every confirmation call appends to ``call_log``;
neither log is ever rewritten. Both are child entities carrying a
``position`` so they read back in the order they were written.

Statuses:
    new, confirmed, packaged, shipped, canceled, blocked

Operators may move an order between any two statuses. The call-outcome
policy layered on top only ever moves an order to ``canceled``, and leaves
orders that are already ``canceled`` or ``blocked`` alone.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.delivery.port import DeliveryType
from storefront.domain import storefront
from storefront.order.events import (
    CallOutcomeLogged,
    OrderAutoCanceled,
    OrderDeliveryUpdated,
    OrderLineItemsUpdated,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    NEW = "new"
    CONFIRMED = "confirmed"
    PACKAGED = "packaged"
    SHIPPED = "shipped"
    CANCELED = "canceled"
    BLOCKED = "blocked"


class CallOutcome(Enum):
    ANSWERED = "answered"
    NO_ANSWER = "no answer"
    WRONG_NUMBER = "wrong number"
    REFUSED = "refused"


# Statuses the call-outcome policy never moves an order out of
_AUTO_POLICY_TERMINAL = {OrderStatus.CANCELED, OrderStatus.BLOCKED}

# Outcomes that cancel on the spot
_CANCELING_OUTCOMES = {CallOutcome.WRONG_NUMBER, CallOutcome.REFUSED}

NO_ANSWER_CANCEL_THRESHOLD = 2
NO_ANSWER_CANCEL_REASON = f"Auto-canceled: No answer after {NO_ANSWER_CANCEL_THRESHOLD} attempts"
AUTO_BLOCK_REASON = "Auto-blocked — banned customer"
BAN_BLOCK_REASON = "Customer banned by admin"
UNBLOCK_REASON = "Unblocked by admin"


def _money(amount) -> float:
    return round(float(amount or 0.0), 2)


def _coerce(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError({field_name: [f"Unknown {field_name}: {value}"]}) from None


def _format_amount(amount) -> str:
    amount = _money(amount)
    return f"{amount:.0f}" if amount.is_integer() else f"{amount:.2f}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLineItem:
    """A product+variant line with the price the customer was quoted."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_slug = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)
    variants = Text()  # JSON: {"Size": "M"}; empty when nothing was selected
    thumbnail = String(max_length=1000)
    position = Integer(default=0)

    @property
    def variant_selection(self) -> dict:
        return json.loads(self.variants) if self.variants else {}

    def to_dict(self) -> dict:
        data = {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "product_slug": self.product_slug,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
        }
        if self.variants:
            data["variants"] = self.variant_selection
        if self.thumbnail:
            data["thumbnail"] = self.thumbnail
        return data


@storefront.entity(part_of="Order")
class StatusChange:
    status = String(choices=OrderStatus, required=True)
    reason = String(max_length=500)
    timestamp = DateTime(required=True)
    position = Integer(default=0)


@storefront.entity(part_of="Order")
class CallAttempt:
    outcome = String(choices=CallOutcome, required=True)
    note = String(max_length=1000)
    timestamp = DateTime(required=True)
    position = Integer(default=0)


@storefront.entity(part_of="Order")
class AdminNote:
    text = Text(required=True)
    timestamp = DateTime(required=True)
    position = Integer(default=0)


@storefront.entity(part_of="Order")
class ChangeLogEntry:
    """Operator edit to line items or delivery, with a readable before/after summary."""

    action = String(required=True, max_length=50)
    changes = Text()
    admin_name = String(max_length=255)
    timestamp = DateTime(required=True)
    position = Integer(default=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_name = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=20)
    customer_wilaya = String(required=True, max_length=100)
    customer_commune = String(max_length=100)
    customer_address = String(max_length=500)
    notes = Text()
    delivery_type = String(choices=DeliveryType, default=DeliveryType.DOMICILE.value)
    delivery_cost = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.NEW.value)
    line_items = HasMany(OrderLineItem)
    status_history = HasMany(StatusChange)
    call_log = HasMany(CallAttempt)
    admin_notes = HasMany(AdminNote)
    change_log = HasMany(ChangeLogEntry)
    call_attempts = Integer(default=0, min_value=0)
    is_banned = Boolean(default=False)
    cancel_reason = String(max_length=500)
    retour_reason = String(max_length=500)
    fraud_score = Integer(default=0, min_value=0)
    created_at = DateTime()
    last_updated = DateTime()

    @invariant.post
    def total_is_lines_plus_delivery(self):
        if not self.line_items:
            return
        expected = _money(sum(item.line_total for item in self.line_items) + (self.delivery_cost or 0.0))
        if _money(self.total_amount) != expected:
            raise ValidationError({"total_amount": [f"Total must equal line totals plus delivery ({expected})"]})

    @invariant.post
    def line_totals_match_price_and_quantity(self):
        for item in self.line_items:
            if _money(item.line_total) != _money(item.unit_price * item.quantity):
                raise ValidationError({"line_items": [f"Line total mismatch for product {item.product_id}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        customer_name,
        customer_phone,
        customer_wilaya,
        line_items_data,
        delivery_type,
        delivery_cost,
        customer_commune=None,
        customer_address=None,
        notes=None,
        banned=False,
    ):
        """Place a new order.

        Totals are recomputed from ``line_items_data`` (dicts with product_id,
        product_name, product_slug, quantity, unit_price and optionally
        variants and thumbnail); any caller-supplied totals are ignored.
        A banned customer's order starts out ``blocked``.
        """
        lines = cls._build_lines(line_items_data)
        delivery_cost = _money(delivery_cost)
        total = _money(sum(line.line_total for line in lines) + delivery_cost)

        initial_status = OrderStatus.BLOCKED if banned else OrderStatus.NEW
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_wilaya=customer_wilaya,
            customer_commune=customer_commune or "",
            customer_address=customer_address or "",
            notes=notes,
            delivery_type=_coerce(DeliveryType, delivery_type, "delivery_type").value,
            delivery_cost=delivery_cost,
            total_amount=total,
            status=initial_status.value,
            line_items=lines,
            status_history=[
                StatusChange(
                    status=initial_status.value,
                    reason=AUTO_BLOCK_REASON if banned else None,
                    timestamp=now,
                    position=0,
                )
            ],
            call_attempts=0,
            is_banned=banned,
            fraud_score=0,
            created_at=now,
            last_updated=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_phone=customer_phone,
                status=initial_status.value,
                line_items=json.dumps([line.to_dict() for line in lines]),
                delivery_type=order.delivery_type,
                delivery_cost=delivery_cost,
                total_amount=total,
                placed_at=now,
            )
        )
        return order

    @staticmethod
    def _build_lines(line_items_data):
        if not line_items_data:
            raise ValidationError({"line_items": ["An order needs at least one line item"]})

        lines = []
        for position, data in enumerate(line_items_data):
            quantity = data.get("quantity", 1)
            unit_price = _money(data["unit_price"])
            variants = data.get("variants") or {}
            lines.append(
                OrderLineItem(
                    product_id=data["product_id"],
                    product_name=data["product_name"],
                    product_slug=data.get("product_slug") or "",
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=_money(unit_price * quantity),
                    variants=json.dumps(variants, sort_keys=True) if variants else None,
                    thumbnail=data.get("thumbnail"),
                    position=position,
                )
            )
        return lines

    # -------------------------------------------------------------------
    # Ordered views of the child collections
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list:
        return sorted(self.line_items, key=lambda item: item.position)

    @property
    def timeline(self) -> list:
        """Status history, oldest first."""
        return sorted(self.status_history, key=lambda entry: entry.position)

    @property
    def calls(self) -> list:
        return sorted(self.call_log, key=lambda entry: entry.position)

    @property
    def subtotal(self) -> float:
        return _money(sum(item.line_total for item in self.line_items))

    # -------------------------------------------------------------------
    # Log helpers
    # -------------------------------------------------------------------
    def _append_history(self, status, reason, at):
        self.add_status_history(
            StatusChange(
                status=status.value,
                reason=reason,
                timestamp=at,
                position=len(self.status_history),
            )
        )

    def _append_change(self, action, changes, admin_name, at):
        self.add_change_log(
            ChangeLogEntry(
                action=action,
                changes=changes,
                admin_name=admin_name,
                timestamp=at,
                position=len(self.change_log),
            )
        )

    def _move_to(self, target, reason, at):
        """Set status and append exactly one history entry."""
        self.status = target.value
        self.cancel_reason = reason if target == OrderStatus.CANCELED else None
        self._append_history(target, reason, at)
        self.last_updated = at

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def update_status(self, new_status, reason=None):
        """Operator override: any status to any status, one history entry per call."""
        target = _coerce(OrderStatus, new_status, "status")
        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self._move_to(target, reason, now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                reason=reason,
                changed_at=now,
            )
        )

    def unblock(self):
        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self._move_to(OrderStatus.NEW, UNBLOCK_REASON, now)
            self.is_banned = False

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=OrderStatus.NEW.value,
                reason=UNBLOCK_REASON,
                changed_at=now,
            )
        )

    def block_for_ban(self):
        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self._move_to(OrderStatus.BLOCKED, BAN_BLOCK_REASON, now)
            self.is_banned = True

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=OrderStatus.BLOCKED.value,
                reason=BAN_BLOCK_REASON,
                changed_at=now,
            )
        )

    def lift_ban(self):
        # Status is left where the operator put it
        self.is_banned = False
        self.last_updated = datetime.now(UTC)

    def mark_retour(self, reason):
        """The parcel came back: cancel the order and count it against the customer."""
        if not reason:
            raise ValidationError({"reason": ["A retour reason is required"]})

        previous = self.status
        history_reason = f"Retour: {reason}"
        now = datetime.now(UTC)

        with atomic_change(self):
            self._move_to(OrderStatus.CANCELED, history_reason, now)
            self.retour_reason = reason
            self.fraud_score = (self.fraud_score or 0) + 1

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=OrderStatus.CANCELED.value,
                reason=history_reason,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Confirmation calls
    # -------------------------------------------------------------------
    def log_call_outcome(self, outcome, note=None):
        """Record a confirmation call and apply the auto-cancel policy.

        Two ``no answer`` calls over the order's whole call log cancel it;
        otherwise a ``wrong number`` or ``refused`` call cancels it on the
        spot. At most one history entry is appended per call.

        Returns:
            (auto_canceled, cancel_reason)
        """
        outcome = _coerce(CallOutcome, outcome, "outcome")
        now = datetime.now(UTC)

        with atomic_change(self):
            self.add_call_log(
                CallAttempt(
                    outcome=outcome.value,
                    note=note,
                    timestamp=now,
                    position=len(self.call_log),
                )
            )
            self.call_attempts = (self.call_attempts or 0) + 1
            self.last_updated = now

        self.raise_(
            CallOutcomeLogged(
                order_id=str(self.id),
                order_number=self.order_number,
                outcome=outcome.value,
                note=note,
                call_attempts=self.call_attempts,
                called_at=now,
            )
        )

        reason = self._auto_cancel_reason(outcome)
        if reason is None:
            return False, None

        previous = self.status
        with atomic_change(self):
            self._move_to(OrderStatus.CANCELED, reason, now)

        self.raise_(
            OrderAutoCanceled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                reason=reason,
                canceled_at=now,
            )
        )
        return True, reason

    def _auto_cancel_reason(self, outcome):
        if OrderStatus(self.status) in _AUTO_POLICY_TERMINAL:
            return None

        no_answers = sum(1 for call in self.call_log if call.outcome == CallOutcome.NO_ANSWER.value)
        if no_answers >= NO_ANSWER_CANCEL_THRESHOLD:
            return NO_ANSWER_CANCEL_REASON
        if outcome in _CANCELING_OUTCOMES:
            return f"Canceled by operator: {outcome.value}"
        return None

    # -------------------------------------------------------------------
    # Operator edits
    # -------------------------------------------------------------------
    def replace_line_items(self, line_items_data, admin_name=None):
        """Swap the whole set of lines and recompute every total."""
        lines = self._build_lines(line_items_data)
        previous_count = len(self.line_items)
        previous_total = _money(self.total_amount)
        previous_subtotal = _money(previous_total - (self.delivery_cost or 0.0))
        subtotal = _money(sum(line.line_total for line in lines))
        new_total = _money(subtotal + (self.delivery_cost or 0.0))
        summary = ", ".join(
            [
                f"Items: {previous_count} → {len(lines)}",
                f"Subtotal: {_format_amount(previous_subtotal)} DA → {_format_amount(subtotal)} DA",
                f"Total: {_format_amount(previous_total)} DA → {_format_amount(new_total)} DA",
            ]
        )
        now = datetime.now(UTC)

        with atomic_change(self):
            for item in list(self.line_items):
                self.remove_line_items(item)
            for line in lines:
                self.add_line_items(line)
            self.total_amount = new_total
            self._append_change("line_items_updated", summary, admin_name, now)
            self.last_updated = now

        self.raise_(
            OrderLineItemsUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                line_items=json.dumps([line.to_dict() for line in lines]),
                previous_total=previous_total,
                new_total=new_total,
            )
        )
        return new_total

    def update_delivery(self, wilaya, commune, delivery_type, delivery_cost, admin_name=None):
        """Change destination and mode; the total follows the new cost."""
        delivery_type = _coerce(DeliveryType, delivery_type, "delivery_type")
        delivery_cost = _money(delivery_cost)
        previous_total = _money(self.total_amount)
        new_total = _money(self.subtotal + delivery_cost)
        summary = ", ".join(
            [
                f"Destination: {self.customer_wilaya}, {self.customer_commune or ''} → {wilaya}, {commune or ''}",
                f"Type: {self.delivery_type} → {delivery_type.value}",
                f"Cost: {_format_amount(self.delivery_cost)} DA → {_format_amount(delivery_cost)} DA",
                f"Total: {_format_amount(previous_total)} DA → {_format_amount(new_total)} DA",
            ]
        )
        now = datetime.now(UTC)

        with atomic_change(self):
            self.customer_wilaya = wilaya
            self.customer_commune = commune or ""
            self.delivery_type = delivery_type.value
            self.delivery_cost = delivery_cost
            self.total_amount = new_total
            self._append_change("delivery_updated", summary, admin_name, now)
            self.last_updated = now

        self.raise_(
            OrderDeliveryUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                wilaya=wilaya,
                commune=commune,
                delivery_type=delivery_type.value,
                delivery_cost=delivery_cost,
                previous_total=previous_total,
                new_total=new_total,
            )
        )
        return new_total

    def update_customer_info(
        self,
        customer_name=None,
        customer_phone=None,
        customer_wilaya=None,
        customer_commune=None,
        customer_address=None,
        notes=None,
    ):
        """Patch contact fields; ``None`` leaves a field unchanged."""
        with atomic_change(self):
            if customer_name is not None:
                self.customer_name = customer_name.strip()
            if customer_phone is not None:
                self.customer_phone = "".join(customer_phone.split())
            if customer_wilaya is not None:
                self.customer_wilaya = customer_wilaya
            if customer_commune is not None:
                self.customer_commune = customer_commune
            if customer_address is not None:
                self.customer_address = customer_address
            if notes is not None:
                self.notes = notes
            self.last_updated = datetime.now(UTC)

    def add_note(self, text):
        if not text or not text.strip():
            raise ValidationError({"text": ["Note text is required"]})

        now = datetime.now(UTC)
        self.add_admin_notes(AdminNote(text=text.strip(), timestamp=now, position=len(self.admin_notes)))
        self.last_updated = now
