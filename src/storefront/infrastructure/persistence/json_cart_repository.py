"""JSON-file-backed implementation of CartRepository.

One file per session key under the carts directory, standing in for the
browser's local storage.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from storefront.domain.exceptions import (
    CorruptCartDataError,
    StoreError,
    ValidationError,
)
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonCartRepository(CartRepository):

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._directory.mkdir(parents=True, exist_ok=True)

    # --- CartRepository interface ---------------------------------------------

    def load(self, session_key: str) -> Cart | None:
        path = self._path_for(session_key)
        if not path.exists():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return self._to_domain(raw)
        except OSError as exc:
            raise StoreError(f"Could not read cart '{session_key}': {exc}") from exc
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            raise CorruptCartDataError(
                f"Cart data for '{session_key}' is corrupt: {exc}"
            ) from exc

    def save(self, session_key: str, cart: Cart) -> None:
        path = self._path_for(session_key)
        try:
            path.write_text(
                json.dumps(self._to_raw(cart), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise StoreError(f"Could not write cart '{session_key}': {exc}") from exc

    def delete(self, session_key: str) -> None:
        self._path_for(session_key).unlink(missing_ok=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> list[dict]:
        return [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "unit_price": line.unit_price.amount,
                "currency": line.unit_price.currency,
                "quantity": line.quantity,
                "stock": line.stock,
                "image_url": line.image_url,
            }
            for line in cart.lines
        ]

    @staticmethod
    def _to_domain(raw: list[dict]) -> Cart:
        if not isinstance(raw, list):
            raise TypeError(f"expected a list of lines, got {type(raw).__name__}")
        lines = []
        for item in raw:
            quantity = item["quantity"]
            if not isinstance(quantity, int) or quantity < 1:
                raise ValueError(f"invalid quantity {quantity!r}")
            lines.append(
                CartLine(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    unit_price=Money(item["unit_price"], item.get("currency", "IDR")),
                    quantity=quantity,
                    stock=item["stock"],
                    image_url=item.get("image_url", ""),
                )
            )
        return Cart(lines=lines)

    # --- File helpers ---------------------------------------------------------

    def _path_for(self, session_key: str) -> Path:
        return self._directory / f"{_UNSAFE_CHARS.sub('_', session_key)}.json"
