"""Application service: the buyer's cart for one client session.

Wraps the Cart aggregate and persists the full cart after every
mutation. A cart that cannot be decoded is discarded and replaced with an
empty one rather than failing the session.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import CorruptCartDataError, EntityNotFoundError
from storefront.domain.model.cart import Cart, CartLine, CartTotals, QuantityChange
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class CartSessionService:

    def __init__(
        self,
        session_key: str,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._session_key = session_key
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._cart = self._load()

    @property
    def cart(self) -> Cart:
        return self._cart

    # --- Commands -------------------------------------------------------------

    def add(self, product_id: str, quantity: int = 1) -> CartLine:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        line = self._cart.add(product, quantity)
        self._persist()
        return line

    def remove(self, product_id: str) -> CartLine | None:
        line = self._cart.remove(product_id)
        self._persist()
        return line

    def set_quantity(self, product_id: str, quantity: int) -> QuantityChange:
        change = self._cart.set_quantity(product_id, quantity)
        if change is QuantityChange.CLAMPED:
            logger.info(
                "cart.quantity_clamped",
                session=self._session_key,
                product_id=product_id,
                requested=quantity,
            )
        self._persist()
        return change

    def clear(self) -> None:
        self._cart.clear()
        self._persist()

    # --- Queries --------------------------------------------------------------

    def totals(self) -> CartTotals:
        return self._cart.totals()

    # --- Persistence ----------------------------------------------------------

    def _load(self) -> Cart:
        try:
            cart = self._cart_repo.load(self._session_key)
        except CorruptCartDataError as exc:
            logger.warning(
                "cart.load_failed", session=self._session_key, error=str(exc)
            )
            self._cart_repo.delete(self._session_key)
            return Cart()
        return cart if cart is not None else Cart()

    def _persist(self) -> None:
        self._cart_repo.save(self._session_key, self._cart)
