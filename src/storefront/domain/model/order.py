"""Order aggregate.

Checkout creates one Order per cart line. Orders from the same checkout
share a ShippingInfo and the first order's id doubles as the confirmation
number shown to the buyer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.shipping import ShippingInfo
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Back-office fulfilment steps, in order.
_FULFILMENT_STEPS = {
    OrderStatus.PAID: OrderStatus.PACKED,
    OrderStatus.PACKED: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.COMPLETED,
}


@dataclass
class Order:
    """Aggregate root for a single purchased product line.

    Use ``Order.place()`` for new orders. The ``__init__`` stays simple so
    repositories can reconstitute persisted orders without re-validating.
    """

    id: int | None
    buyer_id: str
    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at add-to-cart time
    shipping_info: ShippingInfo
    status: OrderStatus = OrderStatus.PENDING_PAYMENT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payment_reference: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        buyer_id: str,
        product_id: str,
        product_name: str,
        quantity: int,
        unit_price: Money,
        shipping_info: ShippingInfo,
    ) -> Order:
        """Create a new order awaiting payment."""
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer id is required")
        if not product_id or not product_id.strip():
            raise ValidationError("Product id is required")

        return Order(
            id=None,
            buyer_id=buyer_id,
            product_id=product_id,
            product_name=product_name,
            quantity=Quantity(quantity),
            unit_price=unit_price,
            shipping_info=shipping_info,
        )

    # --- State transitions ----------------------------------------------------

    def mark_paid(self, payment_reference: str | None = None) -> None:
        """Transition PENDING_PAYMENT -> PAID."""
        if self.status != OrderStatus.PENDING_PAYMENT:
            raise ValidationError(
                f"Cannot mark order #{self.id} paid; current status is "
                f"{self.status.value}, expected PENDING_PAYMENT"
            )
        self.status = OrderStatus.PAID
        if payment_reference is not None:
            self.payment_reference = payment_reference

    def cancel(self) -> None:
        """Transition PENDING_PAYMENT -> CANCELLED.

        Any stock taken for this order must be handled by the caller.
        """
        if self.status == OrderStatus.CANCELLED:
            raise ValidationError("Order is already cancelled")
        if self.status != OrderStatus.PENDING_PAYMENT:
            raise ValidationError(
                f"Cannot cancel order in {self.status.value} status"
            )
        self.status = OrderStatus.CANCELLED

    def advance(self) -> OrderStatus:
        """Move a paid order one fulfilment step forward."""
        next_status = _FULFILMENT_STEPS.get(self.status)
        if next_status is None:
            raise ValidationError(
                f"Cannot advance order in {self.status.value} status"
            )
        self.status = next_status
        return next_status

    # --- Computed properties --------------------------------------------------

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value
