"""Application services: return leg of the hosted payment path.

The browser coming back to the success URL only tells us the buyer is
done with the gateway page, so it clears the cart and nothing else.
Orders move to PAID only through a gateway callback that a
PaymentCallbackVerifier has authenticated.
"""

from __future__ import annotations

import structlog

from storefront.domain.model.order import OrderStatus
from storefront.domain.payment.gateway import PaymentCallbackVerifier
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class PaymentReturnHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_key: str) -> None:
        """Clear the session's cart. Safe to call any number of times."""
        self._cart_repo.delete(session_key)
        logger.info("payment.returned", session=session_key)


class PaymentCallbackHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        verifier: PaymentCallbackVerifier,
    ) -> None:
        self._order_repo = order_repo
        self._verifier = verifier

    def handle(self, payload: str, signature: str) -> list[int]:
        """Mark the orders confirmed by a verified callback as paid.

        Returns the ids of orders that changed status. Orders already paid
        are skipped, so replayed callbacks are harmless. Raises
        InvalidPaymentCallbackError if verification fails.
        """
        order_ids = self._verifier.verify(payload, signature)
        updated: list[int] = []

        for order_id in order_ids:
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                logger.warning("payment.callback_unknown_order", order_id=order_id)
                continue
            if order.status != OrderStatus.PENDING_PAYMENT:
                logger.info(
                    "payment.callback_skipped",
                    order_id=order_id,
                    status=order.status.value,
                )
                continue

            order.mark_paid()
            self._order_repo.save(order)
            updated.append(order_id)
            logger.info("order.paid", order_id=order_id, via="callback")

        return updated
