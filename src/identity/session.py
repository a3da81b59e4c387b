"""User session: binds the signed-in identity to a cart store.

Signing in, registering and signing out all empty the cart, so a cart never
carries over from one identity to another or from an anonymous visit into an
authenticated one.
"""

import structlog
from ordering.cart.store import CartStore

from identity.principal import Principal

logger = structlog.get_logger(__name__)


class UserSession:
    def __init__(self, cart_store: CartStore):
        self.cart_store = cart_store
        self.principal: Principal | None = None
        self.token: str | None = None

    @property
    def is_logged_in(self) -> bool:
        return self.principal is not None

    def _switch_identity(self, principal: Principal | None, token: str | None) -> None:
        self.cart_store.clear()
        self.principal = principal
        self.token = token

    def login(self, principal: Principal, token: str) -> None:
        self._switch_identity(principal, token)
        logger.info("User logged in", user_id=principal.id)

    def register(self, principal: Principal, token: str) -> None:
        self._switch_identity(principal, token)
        logger.info("User registered", user_id=principal.id)

    def logout(self) -> None:
        user_id = self.principal.id if self.principal else None
        self._switch_identity(None, None)
        logger.info("User logged out", user_id=user_id)

    def close(self) -> None:
        """End the session and tear down its cart store."""
        self.principal = None
        self.token = None
        self.cart_store.close()
