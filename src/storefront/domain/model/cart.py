"""Cart aggregate: the buyer's pending selection.

The cart enforces quantity bounds against the last stock it observed so
that obviously unsatisfiable requests are rejected before checkout makes
any network call. It is not a reservation: checkout re-validates every
line against the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.exceptions import OutOfStockError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


class QuantityChange(Enum):
    APPLIED = "APPLIED"
    CLAMPED = "CLAMPED"
    NOT_IN_CART = "NOT_IN_CART"


@dataclass
class CartLine:
    product_id: str
    product_name: str
    unit_price: Money  # snapshot taken when the product was first added
    quantity: int
    stock: int  # most recently observed stock
    image_url: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_price: Money


@dataclass
class Cart:
    """Ordered collection of lines, at most one per product."""

    lines: list[CartLine] = field(default_factory=list)

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        """Add ``quantity`` units of ``product``, merging with an existing line.

        Raises OutOfStockError (leaving the cart untouched) if the merged
        quantity would exceed the product's stock.
        """
        Quantity(quantity)
        existing = self.find(product.id)
        current = existing.quantity if existing is not None else 0

        if current + quantity > product.stock:
            raise OutOfStockError(product.name, product.stock)

        if existing is not None:
            existing.quantity = current + quantity
            existing.stock = product.stock
            return existing

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
            stock=product.stock,
            image_url=product.image_url,
        )
        self.lines.append(line)
        return line

    def remove(self, product_id: str) -> CartLine | None:
        """Drop the line for ``product_id``; absent lines are ignored."""
        line = self.find(product_id)
        if line is not None:
            self.lines.remove(line)
        return line

    def set_quantity(self, product_id: str, quantity: int) -> QuantityChange:
        """Set a line's quantity, clamped to ``[1, stock]``.

        Requests above stock are applied as ``stock`` and reported as
        CLAMPED; the caller decides whether to tell the buyer.
        """
        line = self.find(product_id)
        if line is None:
            return QuantityChange.NOT_IN_CART

        clamped = max(1, min(quantity, line.stock))
        line.quantity = clamped
        if quantity > line.stock:
            return QuantityChange.CLAMPED
        return QuantityChange.APPLIED

    def clear(self) -> None:
        self.lines.clear()

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def totals(self) -> CartTotals:
        total_items = 0
        currency = self.lines[0].unit_price.currency if self.lines else DEFAULT_CURRENCY
        total_price = Money.zero(currency)
        for line in self.lines:
            total_items += line.quantity
            total_price = total_price + line.line_total
        return CartTotals(total_items=total_items, total_price=total_price)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __len__(self) -> int:
        return len(self.lines)
