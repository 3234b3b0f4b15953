"""Application service: Cancel Order use case.

Only orders still awaiting payment can be cancelled. Their stock was
taken at checkout, so it goes back to the catalog once the cancellation
is saved.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: int) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        if order.status != OrderStatus.PENDING_PAYMENT:
            raise ValidationError(
                f"Cannot cancel order in {order.status.value} status"
            )

        # The cancel is persisted first; if it fails, no stock has moved.
        cancelled = replace(order)
        cancelled.cancel()
        self._order_repo.save(cancelled)

        svc = StockReservationService(self._product_repo)
        svc.release(order.product_id, order.quantity.value)
        logger.info("order.cancelled", order_id=order_id, via="back_office")
