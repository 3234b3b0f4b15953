import click

from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_set,
    cart_show,
)
from storefront.infrastructure.cli.checkout_commands import checkout
from storefront.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_list,
    order_show,
)
from storefront.infrastructure.cli.payment_commands import payment_callback, payment_return
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_stock,
    product_update,
)
from storefront.infrastructure.config import ConfigurationError
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront: cart, checkout and order back-office."""
    try:
        configure_logging(settings())
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def cart() -> None:
    """Manage a session's cart."""


@cli.group()
def order() -> None:
    """Inspect and fulfil orders."""


@cli.group()
def payment() -> None:
    """Hosted payment return leg."""


# Register subcommands
cli.add_command(checkout)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_stock)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_set)
cart.add_command(cart_show)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_list)
order.add_command(order_show)
payment.add_command(payment_callback)
payment.add_command(payment_return)
