"""Confirmation-call logging — command and handler.

Operators call each customer to confirm before shipping. The aggregate
applies the auto-cancel policy; the handler reports what happened so the
caller can tell the operator.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CallOutcomeResult:
    auto_canceled: bool
    cancel_reason: str | None = None


@storefront.command(part_of="Order")
class LogCallOutcome:
    order_id = Identifier(required=True)
    outcome = String(required=True, max_length=20)
    note = String(max_length=1000)


@storefront.command_handler(part_of=Order)
class CallOutcomeHandler:
    @handle(LogCallOutcome)
    def log_call_outcome(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        auto_canceled, reason = order.log_call_outcome(command.outcome, note=command.note)
        repo.add(order)

        if auto_canceled:
            logger.info(
                "Order auto-canceled",
                order_number=order.order_number,
                outcome=command.outcome,
                reason=reason,
            )
        else:
            logger.debug(
                "Call outcome logged",
                order_number=order.order_number,
                outcome=command.outcome,
                call_attempts=order.call_attempts,
            )
        return CallOutcomeResult(auto_canceled=auto_canceled, cancel_reason=reason)
