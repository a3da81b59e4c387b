"""FastAPI dependencies that attach the authenticated principal to a request."""

from fastapi import Depends, Header
from shared.errors import Forbidden, Unauthenticated

from identity.authenticator import get_authenticator
from identity.principal import Principal


def require_principal(authorization: str = Header(default="")) -> Principal:
    """Resolve ``Authorization: Bearer <token>`` to a principal, or reject with 401."""
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise Unauthenticated("Access denied. No token provided.")

    principal = get_authenticator().authenticate(token.strip())
    if principal is None:
        raise Unauthenticated("Access denied. Invalid token.")
    return principal


def require_admin(principal: Principal = Depends(require_principal)) -> Principal:
    """Admin-only routes: 403 for any other role."""
    if not principal.is_admin:
        raise Forbidden()
    return principal
