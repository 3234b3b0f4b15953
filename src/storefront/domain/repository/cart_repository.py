"""Abstract repository for carts, keyed by client session."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def load(self, session_key: str) -> Cart | None:
        """Return the stored cart, or None if nothing was stored.

        Raises CorruptCartDataError if stored data cannot be decoded.
        """

    @abstractmethod
    def save(self, session_key: str, cart: Cart) -> None:
        """Persist the full cart state for the session."""

    @abstractmethod
    def delete(self, session_key: str) -> None:
        """Discard whatever is stored for the session."""
