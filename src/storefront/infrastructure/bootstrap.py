"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.payment.gateway import (
    HostedCheckoutGateway,
    PaymentCallbackVerifier,
)
from storefront.domain.payment.strategy import (
    HostedRedirectPayment,
    InlinePayment,
    PaymentStrategy,
)
from storefront.infrastructure.config import ConfigurationError, Settings
from storefront.infrastructure.payment.fake_gateway import (
    FakeCallbackVerifier,
    FakeHostedGateway,
)
from storefront.infrastructure.payment.http_gateway import HttpHostedGateway
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().products_file)


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().orders_file)


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(settings().carts_dir)


def hosted_gateway() -> HostedCheckoutGateway:
    config = settings()
    if config.gateway == "http":
        return HttpHostedGateway(
            endpoint=config.gateway_url,  # type: ignore[arg-type]
            api_key=config.gateway_api_key,
            timeout=config.gateway_timeout,
        )
    return FakeHostedGateway()


def callback_verifier() -> PaymentCallbackVerifier:
    """Verifier for payment callbacks.

    Only the fake gateway has one. The http gateway needs a verifier bound
    to its signing secret, which waits on a fixed callback format, so
    callbacks are refused for it.
    """
    if settings().gateway != "fake":
        raise ConfigurationError(
            "No payment callback verifier is available for "
            f"STOREFRONT_GATEWAY={settings().gateway}"
        )
    return FakeCallbackVerifier()


def payment_strategy() -> PaymentStrategy:
    config = settings()
    if config.payment_mode == "redirect":
        return HostedRedirectPayment(
            gateway=hosted_gateway(),
            success_url=config.success_url,
            cancel_url=config.cancel_url,
        )
    return InlinePayment(settlement_delay=config.settlement_delay)


def place_order_handler() -> PlaceOrderHandler:
    return PlaceOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        payment=payment_strategy(),
    )
