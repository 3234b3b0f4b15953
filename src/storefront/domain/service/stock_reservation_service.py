"""Domain service: Stock Reservation.

Coordinates the cart lines of a checkout with the catalog store.

Validation is a two-phase affair: every line is checked before any line
is committed, so a single unavailable product aborts the checkout without
side effects. Validation is only an optimistic pre-check though; the
authoritative guard is the store's atomic ``decrement_stock``, which the
commit phase calls without re-reading stock first.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from storefront.domain.exceptions import (
    CheckoutValidationError,
    DomainException,
    InsufficientStockError,
    InvalidProductReferenceError,
    InvalidQuantityError,
    ProductLookupError,
    ProductNotFoundError,
    ReservationError,
    StoreError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidatedLine:
    line: CartLine
    product: Product


def check_lines(lines: list[CartLine]) -> None:
    """Reject malformed lines before touching any store.

    A line needs a non-blank product id and an integer quantity of at
    least one. One failure is reported per bad line.
    """
    failures: list[DomainException] = []
    for line in lines:
        label = line.product_name or "<unnamed>"
        if not isinstance(line.product_id, str) or not line.product_id.strip():
            failures.append(InvalidProductReferenceError(label))
        elif not _is_positive_count(line.quantity):
            failures.append(InvalidQuantityError(label, line.quantity))
    if failures:
        raise CheckoutValidationError(failures)


def _is_positive_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def validate(self, lines: list[CartLine]) -> list[ValidatedLine]:
        """Check every line against current stock.

        Collects a failure per line (missing product, insufficient stock,
        lookup error) and raises a single CheckoutValidationError listing
        all of them. Nothing is mutated.
        """
        check_lines(lines)

        validated: list[ValidatedLine] = []
        failures: list[DomainException] = []

        for line in lines:
            try:
                product = self._product_repo.get_by_id(line.product_id)
            except StoreError as exc:
                failures.append(ProductLookupError(line.product_name, exc))
                continue

            if product is None:
                failures.append(ProductNotFoundError(line.product_id, line.product_name))
                continue
            if line.quantity > product.stock:
                failures.append(
                    InsufficientStockError(product.name, line.quantity, product.stock)
                )
                continue
            validated.append(ValidatedLine(line=line, product=product))

        if failures:
            logger.info(
                "checkout.validation_failed",
                failures=[str(f) for f in failures],
            )
            raise CheckoutValidationError(failures)

        return validated

    def reserve(self, product_id: str, quantity: int) -> None:
        """Take stock for one line via the store's atomic decrement.

        Any failure (lost race, product removed, transport error) is
        reported as ReservationError so the caller can compensate.
        """
        try:
            self._product_repo.decrement_stock(product_id, quantity)
        except (InsufficientStockError, ProductNotFoundError, StoreError) as exc:
            logger.warning(
                "stock.reservation_failed",
                product_id=product_id,
                quantity=quantity,
                error=str(exc),
            )
            raise ReservationError(str(exc)) from exc

    def release(self, product_id: str, quantity: int) -> None:
        """Return previously reserved stock (e.g. on order cancellation)."""
        self._product_repo.increment_stock(product_id, quantity)
        logger.info("stock.released", product_id=product_id, quantity=quantity)
