"""Unit tests for the inline and hosted-redirect payment strategies."""

import pytest

from storefront.domain.exceptions import PaymentGatewayError
from storefront.domain.model.order import Order
from storefront.domain.model.shipping import PaymentMethod, ShippingInfo
from storefront.domain.model.value_objects import Money
from storefront.domain.payment.strategy import HostedRedirectPayment, InlinePayment
from storefront.infrastructure.payment.fake_gateway import FakeHostedGateway


def _order(order_id: int, pid: str, name: str, qty: int, price: int) -> Order:
    order = Order.place(
        buyer_id="buyer-1",
        product_id=pid,
        product_name=name,
        quantity=qty,
        unit_price=Money(price),
        shipping_info=ShippingInfo(
            name="Siti Rahma",
            email="siti@example.com",
            phone="081234567890",
            address="Jl. Merdeka No. 10, Bandung",
            payment_method=PaymentMethod.E_WALLET,
        ),
    )
    order.id = order_id
    return order


class TestInlinePayment:

    def test_settles_with_reference(self):
        outcome = InlinePayment().settle(_order(1, "1", "Batik Shirt", 1, 10000))
        assert outcome.settled
        assert outcome.reference.startswith("inline_")

    def test_no_redirect(self):
        assert InlinePayment().start_redirect([_order(1, "1", "Batik Shirt", 1, 10000)], "siti@example.com") is None


class TestHostedRedirectPayment:

    def _strategy(self, gateway):
        return HostedRedirectPayment(
            gateway=gateway,
            success_url="https://shop.test/payment-success",
            cancel_url="https://shop.test/cart",
        )

    def test_settlement_is_deferred(self):
        outcome = self._strategy(FakeHostedGateway()).settle(_order(1, "1", "Batik Shirt", 1, 10000))
        assert not outcome.settled
        assert outcome.reference is None

    def test_builds_one_session_for_all_orders(self):
        gateway = FakeHostedGateway(base_url="https://pay.test/")
        orders = [
            _order(7, "1", "Batik Shirt", 2, 10000),
            _order(8, "3", "Songket", 1, 350000),
        ]

        url = self._strategy(gateway).start_redirect(
            orders, "siti@example.com", {"1": "https://img.test/1.jpg"}
        )

        assert url.startswith("https://pay.test/fake_cs_")
        [request] = gateway.requests
        assert request.buyer_email == "siti@example.com"
        assert request.success_url == "https://shop.test/payment-success"
        assert request.cancel_url == "https://shop.test/cart"
        assert request.currency == "IDR"
        assert request.metadata == {"order_ids": "7,8"}
        assert [(i.name, i.unit_price, i.quantity) for i in request.items] == [
            ("Batik Shirt", 10000, 2),
            ("Songket", 350000, 1),
        ]
        assert request.items[0].image_url == "https://img.test/1.jpg"
        assert request.items[1].image_url == ""

    def test_gateway_error_propagates(self):
        gateway = FakeHostedGateway()
        gateway.configure(should_succeed=False, failure_reason="card network down")
        with pytest.raises(PaymentGatewayError, match="card network down"):
            self._strategy(gateway).start_redirect([_order(1, "1", "Batik Shirt", 1, 10000)], "siti@example.com")
