"""Configurable fake payment gateway for development and testing.

Simulates a hosted checkout without any external calls and accepts
callbacks signed with a fixed test signature. Can be configured at
runtime to fail, which is useful for exercising the compensation path.
"""

from __future__ import annotations

import json
from uuid import uuid4

from storefront.domain.exceptions import (
    InvalidPaymentCallbackError,
    PaymentGatewayError,
)
from storefront.domain.payment.gateway import (
    CheckoutSession,
    CheckoutSessionRequest,
    HostedCheckoutGateway,
    PaymentCallbackVerifier,
)

TEST_SIGNATURE = "test-signature"


class FakeHostedGateway(HostedCheckoutGateway):

    def __init__(self, base_url: str = "https://pay.example.test/checkout/") -> None:
        self.base_url = base_url
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.requests: list[CheckoutSessionRequest] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        self.requests.append(request)
        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)
        session_id = f"fake_cs_{uuid4().hex[:12]}"
        return CheckoutSession(url=f"{self.base_url}{session_id}", session_id=session_id)


class FakeCallbackVerifier(PaymentCallbackVerifier):
    """Trusts payloads of the form ``{"order_ids": [...]}`` with the test signature."""

    def __init__(self, accepted_signature: str = TEST_SIGNATURE) -> None:
        self.accepted_signature = accepted_signature

    def verify(self, payload: str, signature: str) -> list[int]:
        if signature != self.accepted_signature:
            raise InvalidPaymentCallbackError("Payment callback signature is invalid")
        try:
            data = json.loads(payload)
            return [int(order_id) for order_id in data["order_ids"]]
        except (ValueError, KeyError, TypeError) as exc:
            raise InvalidPaymentCallbackError(
                f"Payment callback payload is malformed: {exc}"
            ) from exc
