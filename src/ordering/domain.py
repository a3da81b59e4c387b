"""Ordering bounded context — Shopping Cart and Order Management.

Holds the session-scoped shopping cart, the order aggregate, and the checkout
reconciliation that turns a confirmed payment into a persisted order.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
