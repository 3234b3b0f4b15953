"""CLI commands for a session's cart."""

from __future__ import annotations

import click

from storefront.application.cart_session import CartSessionService
from storefront.application.dto import CartDTO
from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import QuantityChange
from storefront.infrastructure.bootstrap import cart_repository, product_repository

session_option = click.option(
    "--session", "session_key", default="default", show_default=True,
    help="Client session the cart belongs to.",
)


def open_cart_session(session_key: str) -> CartSessionService:
    try:
        return CartSessionService(
            session_key=session_key,
            cart_repo=cart_repository(),
            product_repo=product_repository(),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))


def display_cart(dto: CartDTO) -> None:
    if not dto.lines:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'ID':<6} {'Product':<28} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*71}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_id:<6} {line.product_name:<28} {line.quantity:>5} "
            f"{line.unit_price:>14} {line.line_total:>14}"
        )
    click.echo(f"  {'-'*71}")
    click.echo(f"  {'Items':<35} {dto.total_items:>5}")
    click.echo(f"  {'Cart Total':<35} {dto.total_price:>35}")


@click.command("show")
@session_option
def cart_show(session_key: str) -> None:
    """Show the cart and its totals."""
    display_cart(CartDTO.from_cart(open_cart_session(session_key).cart))


@click.command("add")
@session_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
def cart_add(session_key: str, product_id: str, quantity: int) -> None:
    """Add a product to the cart."""
    service = open_cart_session(session_key)
    try:
        line = service.add(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{line.product_name} added to cart (now {line.quantity}).")


@click.command("remove")
@session_option
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(session_key: str, product_id: str) -> None:
    """Remove a product from the cart."""
    service = open_cart_session(session_key)
    try:
        line = service.remove(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if line is not None:
        click.echo(f"{line.product_name} removed from cart.")


@click.command("set")
@session_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
def cart_set(session_key: str, product_id: str, quantity: int) -> None:
    """Change a line's quantity (clamped to stock)."""
    service = open_cart_session(session_key)
    try:
        change = service.set_quantity(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if change is QuantityChange.NOT_IN_CART:
        click.echo(f"Product #{product_id} is not in the cart.")
        return

    line = service.cart.find(product_id)
    if change is QuantityChange.CLAMPED:
        click.echo(f"Only {line.stock} in stock; quantity set to {line.quantity}.")
    else:
        click.echo(f"Quantity set to {line.quantity}.")


@click.command("clear")
@session_option
def cart_clear(session_key: str) -> None:
    """Empty the cart."""
    service = open_cart_session(session_key)
    try:
        service.clear()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Cart cleared.")
