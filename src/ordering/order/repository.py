"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order lookups used by the order history and admin listings.

    Listings are unbounded: ``limit(None)`` lifts the aggregate's default
    query window. It must come last, since cloning the queryset resets an
    empty limit to the default.
    """

    def find_by_owner(self, owner_id: str) -> list[Order]:
        """Orders placed by one principal, newest first."""
        return (
            self._dao.query.filter(owner_id=str(owner_id))
            .order_by("-created_at")
            .limit(None)
            .all()
            .items
        )

    def find_all(self) -> list[Order]:
        """Every order, newest first."""
        return self._dao.query.order_by("-created_at").limit(None).all().items
