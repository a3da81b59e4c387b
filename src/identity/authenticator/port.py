"""Authenticator port — resolves a bearer token to a principal.

Token issuance and verification belong to the identity provider; the
storefront only asks who a token belongs to.
"""

from abc import ABC, abstractmethod

from identity.principal import Principal


class Authenticator(ABC):
    @abstractmethod
    def authenticate(self, token: str) -> Principal | None:
        """Return the principal for ``token``, or None when it is unknown or expired."""
        ...
