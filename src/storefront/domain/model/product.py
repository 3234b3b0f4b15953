"""Product aggregate.

Products live independently of carts and orders. They have their own
lifecycle: prices change, stock is received and sold.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    ``stock`` is the only shared mutable resource in the checkout flow.
    Stores must route concurrent decrements through ``take_stock`` (or an
    equivalent floor-checked update) so it never goes negative.
    """

    id: str
    name: str
    price: Money
    stock: int = 0
    image_url: str = ""
    category: str = ""
    description: str = ""

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Carts and orders keep the price they snapshotted earlier.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock cannot be negative")
        self.stock = quantity

    def take_stock(self, quantity: int) -> None:
        """Decrement stock, refusing to go below zero."""
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(self.name, quantity, self.stock)
        self.stock -= quantity

    def restock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock += quantity

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
