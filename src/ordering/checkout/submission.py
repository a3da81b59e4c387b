"""How checkout hands a paid cart to the order API.

OrderSubmitter is the port; HttpOrderSubmitter posts to ``POST /orders`` with
an explicit timeout and turns every failure into a storefront error so the
checkout can settle in a terminal state instead of waiting indefinitely.
"""

import os
from abc import ABC, abstractmethod

import httpx
import structlog
from shared.errors import (
    Forbidden,
    InvalidRequest,
    NotFound,
    PersistenceFailure,
    StorefrontError,
    Unauthenticated,
    UpstreamFailure,
)

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

_STATUS_ERRORS: dict[int, type[StorefrontError]] = {
    400: InvalidRequest,
    401: Unauthenticated,
    403: Forbidden,
    404: NotFound,
    422: InvalidRequest,
}


class OrderSubmitter(ABC):
    @abstractmethod
    def submit(self, order_data: dict, token: str | None, idempotency_key: str) -> dict:
        """Create the order and return it as acknowledged by the backend."""
        ...


class HttpOrderSubmitter(OrderSubmitter):
    def __init__(self, client: httpx.Client, path: str = "/orders", timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.path = path
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "HttpOrderSubmitter":
        timeout = float(os.environ.get("ORDER_SUBMIT_TIMEOUT", DEFAULT_TIMEOUT))
        base_url = os.environ.get("STOREFRONT_API_URL", "http://localhost:8000")
        return cls(httpx.Client(base_url=base_url, timeout=timeout), timeout=timeout)

    def submit(self, order_data: dict, token: str | None, idempotency_key: str) -> dict:
        headers = {"Idempotency-Key": idempotency_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.client.post(self.path, json=order_data, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            logger.error("Order submission timed out", timeout=self.timeout)
            raise UpstreamFailure("Order service did not respond in time") from exc
        except httpx.HTTPError as exc:
            logger.error("Order submission failed", error=str(exc))
            raise UpstreamFailure("Order service unreachable") from exc

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = payload.get("message") if isinstance(payload, dict) else None
            error_cls = _STATUS_ERRORS.get(response.status_code, PersistenceFailure)
            raise error_cls(message, status_code=response.status_code)

        try:
            order = response.json()["order"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error(
                "Order service acknowledged without an order",
                status_code=response.status_code,
                content_type=response.headers.get("content-type"),
            )
            raise UpstreamFailure("Order service returned an unreadable response") from exc
        if not isinstance(order, dict):
            raise UpstreamFailure("Order service returned an unreadable response")
        return order
