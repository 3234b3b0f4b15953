"""JSON-file-backed implementation of OrderRepository (the order store)."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.shipping import ShippingInfo
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile, index_of, upsert


class JsonOrderRepository(OrderRepository):
    """Orders are kept oldest first; ids are sequential integers."""

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, order_id: int) -> Order | None:
        records = self._file.read()
        i = index_of(records, order_id)
        return None if i is None else _order_from(records[i])

    def list_all(self) -> list[Order]:
        return [_order_from(record) for record in self._file.read()]

    def list_by_buyer(self, buyer_id: str) -> list[Order]:
        return [order for order in self.list_all() if order.buyer_id == buyer_id]

    def save(self, order: Order) -> None:
        with self._file.updating() as records:
            order_id = order.id if order.id is not None else _next_id(records)
            record = _record_of(order)
            record["id"] = order_id
            upsert(records, record)
        # Only a written order gets its id.
        order.id = order_id


def _next_id(records: list[dict]) -> int:
    return max((record["id"] for record in records), default=0) + 1


def _record_of(order: Order) -> dict:
    return {
        "id": order.id,
        "buyer_id": order.buyer_id,
        "product_id": order.product_id,
        "product_name": order.product_name,
        "quantity": order.quantity.value,
        "unit_price": order.unit_price.amount,
        "currency": order.unit_price.currency,
        "status": order.status.value,
        "shipping_info": order.shipping_info.to_dict(),
        "created_at": order.created_at.isoformat(),
        "payment_reference": order.payment_reference,
    }


def _order_from(record: dict) -> Order:
    return Order(
        id=record["id"],
        buyer_id=record["buyer_id"],
        product_id=record["product_id"],
        product_name=record["product_name"],
        quantity=Quantity(record["quantity"]),
        unit_price=Money(int(record["unit_price"]), record.get("currency", DEFAULT_CURRENCY)),
        shipping_info=ShippingInfo.from_dict(record["shipping_info"]),
        status=OrderStatus(record["status"]),
        created_at=datetime.fromisoformat(record["created_at"]),
        payment_reference=record.get("payment_reference"),
    )
