"""JSON-file-backed implementation of ProductRepository (the catalog store)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile, index_of, upsert


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, product_id: str) -> Product | None:
        records = self._file.read()
        i = index_of(records, product_id)
        return None if i is None else _product_from(records[i])

    def get_by_name(self, name: str) -> Product | None:
        wanted = name.lower()
        return next((p for p in self.list_all() if p.name.lower() == wanted), None)

    def list_all(self) -> list[Product]:
        return [_product_from(record) for record in self._file.read()]

    def save(self, product: Product) -> None:
        with self._file.updating() as records:
            upsert(records, _record_of(product))

    def decrement_stock(self, product_id: str, quantity: int) -> None:
        # The floor check in take_stock runs under the file lock, so two
        # buyers can never both pass it for the last unit.
        self._change_stock(product_id, lambda product: product.take_stock(quantity))

    def increment_stock(self, product_id: str, quantity: int) -> None:
        self._change_stock(product_id, lambda product: product.restock(quantity))

    def _change_stock(self, product_id: str, change: Callable[[Product], None]) -> None:
        with self._file.updating() as records:
            i = index_of(records, product_id)
            if i is None:
                raise ProductNotFoundError(product_id)
            product = _product_from(records[i])
            change(product)
            records[i] = _record_of(product)


def _product_from(record: dict) -> Product:
    return Product(
        id=record["id"],
        name=record["name"],
        price=Money(int(record["price"]), record.get("currency", DEFAULT_CURRENCY)),
        stock=record.get("stock", 0),
        image_url=record.get("image_url", ""),
        category=record.get("category", ""),
        description=record.get("description", ""),
    )


def _record_of(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price.amount,
        "currency": product.price.currency,
        "stock": product.stock,
        "image_url": product.image_url,
        "category": product.category,
        "description": product.description,
    }
