"""Application service: Place Order (checkout) use case.

Turns the lines of a cart into persisted orders, one per line:

1. Preconditions: non-empty cart, known buyer. No I/O on failure.
2. Validate every line against current stock (validate-all-then-commit).
   Any failure aborts the checkout with nothing written.
3. Commit each line in turn: insert the order as PENDING_PAYMENT, take
   stock with the catalog's atomic decrement, settle payment, mark paid.
   A failed decrement cancels that line's order and stops the loop;
   orders committed before it are kept.
4. Hand over to the payment strategy for an optional hosted redirect.

Lines are committed strictly one after another; line N+1 starts only
once line N has been paid or compensated.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from storefront.application.dto import CheckoutResult
from storefront.domain.exceptions import (
    CheckoutCommitError,
    EmptyCartError,
    OrderPersistenceError,
    PaymentGatewayError,
    PaymentInitiationError,
    ReservationError,
    StoreError,
    UnauthenticatedError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import Order
from storefront.domain.model.shipping import ShippingInfo
from storefront.domain.payment.strategy import PaymentStrategy
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
    ValidatedLine,
)

logger = structlog.get_logger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        payment: PaymentStrategy,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._payment = payment

    def handle(
        self,
        lines: list[CartLine],
        buyer_id: str | None,
        shipping_info: ShippingInfo,
    ) -> CheckoutResult:
        """Check out ``lines`` for ``buyer_id``.

        Returns a CheckoutResult when every line became an order. Raises a
        CheckoutError subclass otherwise; CheckoutCommitError carries the
        ids of orders that were committed before the failing line.
        """
        if not lines:
            raise EmptyCartError()
        if not buyer_id or not buyer_id.strip():
            raise UnauthenticatedError()

        with structlog.contextvars.bound_contextvars(buyer_id=buyer_id):
            logger.info("checkout.started", lines=len(lines))

            svc = StockReservationService(self._product_repo)
            validated = svc.validate(lines)

            committed: list[Order] = []
            for item in validated:
                committed.append(
                    self._commit_line(svc, item, buyer_id, shipping_info, committed)
                )

            redirect_url = self._start_redirect(svc, committed, shipping_info, lines)

            order_ids = [order.id for order in committed]
            logger.info(
                "checkout.completed",
                order_ids=order_ids,
                redirect=redirect_url is not None,
            )
            return CheckoutResult(
                order_id=order_ids[0],  # type: ignore[arg-type]
                order_ids=order_ids,  # type: ignore[arg-type]
                redirect_url=redirect_url,
            )

    # --- Commit phase ---------------------------------------------------------

    def _commit_line(
        self,
        svc: StockReservationService,
        item: ValidatedLine,
        buyer_id: str,
        shipping_info: ShippingInfo,
        committed: list[Order],
    ) -> Order:
        line = item.line
        committed_ids = [order.id for order in committed]

        order = Order.place(
            buyer_id=buyer_id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            shipping_info=shipping_info,
        )
        try:
            self._order_repo.save(order)
        except StoreError as exc:
            logger.error(
                "order.persist_failed", product_id=line.product_id, error=str(exc)
            )
            raise CheckoutCommitError(
                line.product_name, OrderPersistenceError(str(exc)), committed_ids
            ) from exc
        logger.info("order.created", order_id=order.id, product_id=line.product_id)

        try:
            svc.reserve(line.product_id, line.quantity)
        except ReservationError as exc:
            self._cancel(order)
            raise CheckoutCommitError(line.product_name, exc, committed_ids) from exc

        outcome = self._payment.settle(order)
        if outcome.settled:
            order = self._mark_paid(order, outcome.reference)
        return order

    def _mark_paid(self, order: Order, reference: str | None) -> Order:
        """Persist PENDING_PAYMENT -> PAID; a failure here is not fatal."""
        paid = replace(order)
        paid.mark_paid(reference)
        try:
            self._order_repo.save(paid)
        except StoreError as exc:
            logger.warning(
                "order.status_update_failed",
                order_id=order.id,
                status=paid.status.value,
                error=str(exc),
            )
            return order
        logger.info("order.paid", order_id=order.id)
        return paid

    def _cancel(self, order: Order) -> None:
        """Compensate an order whose stock could not be taken."""
        cancelled = replace(order)
        cancelled.cancel()
        try:
            self._order_repo.save(cancelled)
        except StoreError as exc:
            logger.error("order.cancel_failed", order_id=order.id, error=str(exc))
            return
        logger.info("order.cancelled", order_id=order.id)

    # --- Payment hand-over ----------------------------------------------------

    def _start_redirect(
        self,
        svc: StockReservationService,
        orders: list[Order],
        shipping_info: ShippingInfo,
        lines: list[CartLine],
    ) -> str | None:
        image_urls = {line.product_id: line.image_url for line in lines if line.image_url}
        try:
            return self._payment.start_redirect(orders, shipping_info.email, image_urls)
        except (PaymentGatewayError, StoreError) as exc:
            logger.error("payment.redirect_failed", error=str(exc))
            for order in orders:
                self._cancel(order)
                try:
                    svc.release(order.product_id, order.quantity.value)
                except StoreError as release_exc:
                    logger.error(
                        "stock.release_failed",
                        order_id=order.id,
                        error=str(release_exc),
                    )
            raise PaymentInitiationError(f"Could not start payment: {exc}") from exc
