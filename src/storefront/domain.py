"""Storefront bounded context — direct-order shop with cash-on-delivery.

Holds the client-side shopping cart (reducer store with write-through
persistence), the checkout translator that turns a cart into an order
request, and the order lifecycle engine operators drive through
confirmation calls and manual status changes.
"""

import os

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir=os.getenv("LOG_DIR"))

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
