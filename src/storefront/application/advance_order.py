"""Application service: Advance Order use case (back-office fulfilment).

Moves a paid order through PACKED, SHIPPED and COMPLETED, one step per
call.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class AdvanceOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderStatus:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        new_status = order.advance()
        self._order_repo.save(order)
        logger.info("order.advanced", order_id=order_id, status=new_status.value)
        return new_status
