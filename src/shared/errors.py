"""Error taxonomy shared by the storefront bounded contexts.

Each error carries the HTTP status it maps to, so API layers can render a
terminal failure without inspecting messages.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class Unauthenticated(StorefrontError):
    status_code = 401
    default_message = "Not authorized, no user data"


class Forbidden(StorefrontError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class InvalidRequest(StorefrontError):
    status_code = 400
    default_message = "Invalid request"


class InvalidQuantity(InvalidRequest):
    default_message = "Quantity must be a positive integer"


class InvalidStatus(InvalidRequest):
    default_message = "Invalid status provided"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class UpstreamFailure(StorefrontError):
    """An external collaborator (payment gateway, backend API) failed or timed out."""

    status_code = 502
    default_message = "Upstream service failure"


class PersistenceFailure(StorefrontError):
    status_code = 500
    default_message = "Server Error"
