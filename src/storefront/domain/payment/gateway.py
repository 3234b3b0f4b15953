"""Hosted payment gateway ports (abstract interfaces).

A hosted gateway takes the buyer to an external payment page and brings
them back through a success or cancel URL. The return navigation proves
nothing; only a callback verified server-side may mark orders paid.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CheckoutItem:
    name: str
    unit_price: int  # smallest currency unit
    quantity: int
    image_url: str = ""


@dataclass(frozen=True)
class CheckoutSessionRequest:
    items: list[CheckoutItem]
    buyer_email: str
    success_url: str
    cancel_url: str
    currency: str = "IDR"
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckoutSession:
    """Result of creating a hosted checkout session."""

    url: str
    session_id: str | None = None


class HostedCheckoutGateway(ABC):

    @abstractmethod
    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        """Start a hosted checkout and return the page to redirect to.

        Raises PaymentGatewayError on an error payload and
        OperationTimeoutError when the gateway does not answer in time.
        """


class PaymentCallbackVerifier(ABC):
    """Server-side verification of gateway payment callbacks.

    A real deployment must supply an implementation bound to its
    gateway's signing scheme.
    """

    @abstractmethod
    def verify(self, payload: str, signature: str) -> list[int]:
        """Return the order ids confirmed as paid by a signed payload.

        Raises InvalidPaymentCallbackError if the payload is not authentic
        or cannot be parsed.
        """
