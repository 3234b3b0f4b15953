"""Unit tests for the Order aggregate and its status transitions."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.shipping import PaymentMethod, ShippingInfo
from storefront.domain.model.value_objects import Money


def _shipping() -> ShippingInfo:
    return ShippingInfo(
        name="Siti Rahma",
        email="siti@example.com",
        phone="081234567890",
        address="Jl. Merdeka No. 10, Bandung",
        payment_method=PaymentMethod.BANK_TRANSFER,
    )


def _order(qty: int = 2, price: int = 10000) -> Order:
    return Order.place(
        buyer_id="buyer-1",
        product_id="1",
        product_name="Batik Shirt",
        quantity=qty,
        unit_price=Money(price),
        shipping_info=_shipping(),
    )


class TestOrderPlacement:

    def test_new_order_awaits_payment(self):
        order = _order()
        assert order.id is None  # assigned by repository
        assert order.status == OrderStatus.PENDING_PAYMENT

    def test_total_price(self):
        assert _order(qty=3, price=10000).total_price == Money(30000)

    def test_blank_buyer_rejected(self):
        with pytest.raises(ValidationError, match="Buyer id"):
            Order.place("  ", "1", "Batik Shirt", 1, Money(10000), _shipping())

    def test_blank_product_rejected(self):
        with pytest.raises(ValidationError, match="Product id"):
            Order.place("buyer-1", "", "Batik Shirt", 1, Money(10000), _shipping())

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _order(qty=0)


class TestOrderTransitions:

    def test_mark_paid(self):
        order = _order()
        order.mark_paid("inline_abc")
        assert order.status == OrderStatus.PAID
        assert order.payment_reference == "inline_abc"

    def test_mark_paid_twice_rejected(self):
        order = _order()
        order.mark_paid()
        with pytest.raises(ValidationError, match="expected PENDING_PAYMENT"):
            order.mark_paid()

    def test_cancel_pending(self):
        order = _order()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED

    def test_cancel_twice_rejected(self):
        order = _order()
        order.cancel()
        with pytest.raises(ValidationError, match="already cancelled"):
            order.cancel()

    def test_cancel_paid_rejected(self):
        order = _order()
        order.mark_paid()
        with pytest.raises(ValidationError, match="PAID"):
            order.cancel()

    def test_fulfilment_steps(self):
        order = _order()
        order.mark_paid()
        assert order.advance() == OrderStatus.PACKED
        assert order.advance() == OrderStatus.SHIPPED
        assert order.advance() == OrderStatus.COMPLETED

    def test_completed_cannot_advance(self):
        order = _order()
        order.mark_paid()
        for _ in range(3):
            order.advance()
        with pytest.raises(ValidationError, match="COMPLETED"):
            order.advance()

    def test_unpaid_cannot_advance(self):
        with pytest.raises(ValidationError, match="PENDING_PAYMENT"):
            _order().advance()
