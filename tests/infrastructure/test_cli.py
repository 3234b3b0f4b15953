"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.main import cli

CHECKOUT_ARGS = [
    "checkout",
    "--session", "s1",
    "--buyer", "buyer-1",
    "--name", "Siti Rahma",
    "--email", "siti@example.com",
    "--phone", "081234567890",
    "--address", "Jl. Merdeka No. 10, Bandung",
    "--payment-method", "bank_transfer",
]


@pytest.fixture(autouse=True)
def fresh_settings():
    bootstrap.settings.cache_clear()
    yield
    bootstrap.settings.cache_clear()


def _runner(tmp_path, **env) -> CliRunner:
    base = {
        "STOREFRONT_DATA_DIR": str(tmp_path),
        "STOREFRONT_ENV": "test",
        "STOREFRONT_SETTLEMENT_DELAY": "0",
    }
    base.update(env)
    return CliRunner(env=base)


def _invoke(runner: CliRunner, *args: str):
    return runner.invoke(cli, list(args), catch_exceptions=False)


def _stock_shop(runner: CliRunner) -> None:
    assert _invoke(runner, "product", "add", "--name", "Batik Shirt", "--price", "120000", "--stock", "5").exit_code == 0
    assert _invoke(runner, "cart", "add", "--session", "s1", "--product", "1", "--quantity", "2").exit_code == 0


def test_product_add_and_list(tmp_path):
    runner = _runner(tmp_path)

    result = _invoke(runner, "product", "add", "--name", "Batik Shirt", "--price", "120000", "--stock", "5")
    assert result.exit_code == 0
    assert "Product #1 'Batik Shirt' added at Rp120.000 (5 in stock)" in result.output

    result = _invoke(runner, "product", "list")
    assert "Batik Shirt" in result.output
    assert "Rp120.000" in result.output


def test_cart_commands(tmp_path):
    runner = _runner(tmp_path)
    _stock_shop(runner)

    result = _invoke(runner, "cart", "show", "--session", "s1")
    assert "Rp240.000" in result.output

    result = _invoke(runner, "cart", "set", "--session", "s1", "--product", "1", "--quantity", "9")
    assert "Only 5 in stock; quantity set to 5." in result.output

    result = _invoke(runner, "cart", "add", "--session", "s1", "--product", "1")
    assert result.exit_code == 1
    assert "Only 5 of Batik Shirt in stock" in result.output

    _invoke(runner, "cart", "clear", "--session", "s1")
    assert "Cart is empty." in _invoke(runner, "cart", "show", "--session", "s1").output


def test_inline_checkout(tmp_path):
    runner = _runner(tmp_path)
    _stock_shop(runner)

    result = _invoke(runner, *CHECKOUT_ARGS)

    assert result.exit_code == 0
    assert "Order #1 placed (1 order(s))." in result.output
    assert "Payment received" in result.output
    assert "Cart is empty." in _invoke(runner, "cart", "show", "--session", "s1").output

    orders = json.loads((tmp_path / "orders.json").read_text())
    assert orders[0]["status"] == "PAID"
    products = json.loads((tmp_path / "products.json").read_text())
    assert products[0]["stock"] == 3

    result = _invoke(runner, "order", "advance", "--id", "1")
    assert "Order #1 is now PACKED." in result.output


def test_checkout_empty_cart(tmp_path):
    result = _invoke(_runner(tmp_path), *CHECKOUT_ARGS)
    assert result.exit_code == 1
    assert "Cart is empty" in result.output


def test_checkout_rejects_bad_shipping_info(tmp_path):
    runner = _runner(tmp_path)
    _stock_shop(runner)

    args = list(CHECKOUT_ARGS)
    args[args.index("--phone") + 1] = "0812"
    result = _invoke(runner, *args)

    assert result.exit_code == 1
    assert "Phone number" in result.output
    assert "No orders found." in _invoke(runner, "order", "list").output


def test_redirect_checkout_then_callback_and_return(tmp_path):
    runner = _runner(tmp_path, STOREFRONT_PAYMENT_MODE="redirect")
    _stock_shop(runner)

    result = _invoke(runner, *CHECKOUT_ARGS)
    assert result.exit_code == 0
    assert "Complete payment at: https://pay.example.test/checkout/fake_cs_" in result.output
    assert "PENDING_PAYMENT" in _invoke(runner, "order", "show", "--id", "1").output
    # Cart stays until the buyer comes back from the gateway.
    assert "Batik Shirt" in _invoke(runner, "cart", "show", "--session", "s1").output

    result = _invoke(
        runner, "payment", "callback",
        "--payload", json.dumps({"order_ids": [1]}),
        "--signature", "test-signature",
    )
    assert "Marked paid: #1" in result.output

    _invoke(runner, "payment", "return", "--session", "s1")
    assert "Cart is empty." in _invoke(runner, "cart", "show", "--session", "s1").output
    assert "PAID" in _invoke(runner, "order", "list", "--buyer", "buyer-1").output


def test_cancel_unpaid_order_returns_stock(tmp_path):
    runner = _runner(tmp_path, STOREFRONT_PAYMENT_MODE="redirect")
    _stock_shop(runner)
    _invoke(runner, *CHECKOUT_ARGS)

    result = _invoke(runner, "order", "cancel", "--id", "1")

    assert "Order #1 cancelled." in result.output
    products = json.loads((tmp_path / "products.json").read_text())
    assert products[0]["stock"] == 5


def test_invalid_configuration_reported(tmp_path):
    result = _invoke(_runner(tmp_path, STOREFRONT_PAYMENT_MODE="barter"), "product", "list")
    assert result.exit_code == 1
    assert "STOREFRONT_PAYMENT_MODE" in result.output
