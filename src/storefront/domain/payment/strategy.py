"""Payment strategies used by the checkout engine.

Two payment paths exist: inline settlement, where payment completes
while the buyer waits and every order is marked paid on the spot, and
hosted redirect, where orders stay PENDING_PAYMENT and the buyer is sent
to the gateway's page. The engine depends only on ``PaymentStrategy``.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import uuid4

import structlog

from storefront.domain.model.order import Order
from storefront.domain.payment.gateway import (
    CheckoutItem,
    CheckoutSessionRequest,
    HostedCheckoutGateway,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentOutcome:
    settled: bool
    reference: str | None = None

    @staticmethod
    def settled_with(reference: str) -> PaymentOutcome:
        return PaymentOutcome(settled=True, reference=reference)

    @staticmethod
    def deferred() -> PaymentOutcome:
        return PaymentOutcome(settled=False)


class PaymentStrategy(ABC):

    @abstractmethod
    def settle(self, order: Order) -> PaymentOutcome:
        """Called once per order, right after its stock was reserved."""

    @abstractmethod
    def start_redirect(
        self,
        orders: list[Order],
        buyer_email: str,
        image_urls: dict[str, str] | None = None,
    ) -> str | None:
        """Called once per checkout after every order committed.

        Returns the URL the buyer must be sent to, or None when no
        redirect is needed.
        """


class InlinePayment(PaymentStrategy):
    """Simulated settlement: every order is paid before checkout returns."""

    def __init__(self, settlement_delay: float = 0.0) -> None:
        self._settlement_delay = settlement_delay

    def settle(self, order: Order) -> PaymentOutcome:
        if self._settlement_delay > 0:
            time.sleep(self._settlement_delay)
        return PaymentOutcome.settled_with(f"inline_{uuid4().hex[:12]}")

    def start_redirect(
        self,
        orders: list[Order],
        buyer_email: str,
        image_urls: dict[str, str] | None = None,
    ) -> str | None:
        return None


class HostedRedirectPayment(PaymentStrategy):
    """Defers settlement to an external hosted checkout page."""

    def __init__(
        self,
        gateway: HostedCheckoutGateway,
        success_url: str,
        cancel_url: str,
    ) -> None:
        self._gateway = gateway
        self._success_url = success_url
        self._cancel_url = cancel_url

    def settle(self, order: Order) -> PaymentOutcome:
        return PaymentOutcome.deferred()

    def start_redirect(
        self,
        orders: list[Order],
        buyer_email: str,
        image_urls: dict[str, str] | None = None,
    ) -> str | None:
        image_urls = image_urls or {}
        request = CheckoutSessionRequest(
            items=[
                CheckoutItem(
                    name=order.product_name,
                    unit_price=order.unit_price.amount,
                    quantity=order.quantity.value,
                    image_url=image_urls.get(order.product_id, ""),
                )
                for order in orders
            ],
            buyer_email=buyer_email,
            success_url=self._success_url,
            cancel_url=self._cancel_url,
            currency=orders[0].unit_price.currency,
            metadata={"order_ids": ",".join(str(order.id) for order in orders)},
        )
        session = self._gateway.create_session(request)
        logger.info(
            "payment.redirect_started",
            session_id=session.session_id,
            order_ids=[order.id for order in orders],
        )
        return session.url
