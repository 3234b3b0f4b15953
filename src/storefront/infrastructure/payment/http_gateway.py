"""HTTP adapter for a hosted checkout service.

Posts the checkout to a payment endpoint (for example a serverless
function fronting Stripe Checkout) and expects ``{"url": ...}`` back, or
``{"error": message}`` on failure.
"""

from __future__ import annotations

import httpx
import structlog

from storefront.domain.exceptions import OperationTimeoutError, PaymentGatewayError
from storefront.domain.payment.gateway import (
    CheckoutSession,
    CheckoutSessionRequest,
    HostedCheckoutGateway,
)

logger = structlog.get_logger(__name__)


class HttpHostedGateway(HostedCheckoutGateway):

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = client or httpx.Client(timeout=timeout)
        self.client.headers.update(headers)

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        body = {
            "items": [
                {
                    "name": item.name,
                    "price": item.unit_price,
                    "quantity": item.quantity,
                    "image": item.image_url or None,
                }
                for item in request.items
            ],
            "email": request.buyer_email,
            "currency": request.currency.lower(),
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "metadata": request.metadata,
        }

        try:
            response = self.client.post(self.endpoint, json=body, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise OperationTimeoutError(
                f"Payment gateway did not answer within {self.timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(f"Payment gateway unreachable: {exc}") from exc

        logger.debug("payment.gateway_response", status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or data.get("error"):
            message = data.get("error") or f"HTTP {response.status_code}"
            raise PaymentGatewayError(f"Payment gateway error: {message}")

        url = data.get("url")
        if not url:
            raise PaymentGatewayError("Payment gateway returned no redirect URL")

        return CheckoutSession(url=url, session_id=data.get("id"))

    def close(self) -> None:
        self.client.close()
