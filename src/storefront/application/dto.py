"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the buyer."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "Rp120.000"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    lines: list[CartLineDTO]
    total_items: int
    total_price: str

    @staticmethod
    def from_cart(cart: Cart) -> CartDTO:
        totals = cart.totals()
        return CartDTO(
            lines=[
                CartLineDTO(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=str(line.unit_price),
                    line_total=str(line.line_total),
                )
                for line in cart.lines
            ],
            total_items=totals.total_items,
            total_price=str(totals.total_price),
        )


@dataclass(frozen=True)
class OrderDTO:
    """Output: an order as displayed to the buyer or back-office."""

    id: int
    buyer_id: str
    product_name: str
    quantity: int
    unit_price: str
    total_price: str
    status: str
    recipient: str
    payment_method: str
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            buyer_id=order.buyer_id,
            product_name=order.product_name,
            quantity=order.quantity.value,
            unit_price=str(order.unit_price),
            total_price=str(order.total_price),
            status=order.status.value,
            recipient=order.shipping_info.name,
            payment_method=order.shipping_info.payment_method.value,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class CheckoutResult:
    """Output: a checkout where every cart line became an order.

    ``order_id`` is the first order's id, used as the confirmation number.
    ``redirect_url`` is set when the buyer must finish payment on a
    hosted page.
    """

    order_id: int
    order_ids: list[int] = field(default_factory=list)
    redirect_url: str | None = None

    @property
    def requires_redirect(self) -> bool:
        return self.redirect_url is not None
