"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.advance_order import AdvanceOrderHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.show_order import ListOrdersHandler, ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import order_repository, product_repository


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Buyer:    {dto.buyer_id}")
    click.echo(f"Ship to:  {dto.recipient}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<28} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*64}")
    click.echo(
        f"  {dto.product_name:<28} {dto.quantity:>5} {dto.unit_price:>14} {dto.total_price:>14}"
    )


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--buyer", "buyer_id", default=None, help="Only this buyer's orders.")
def order_list(buyer_id: str | None) -> None:
    """List orders, newest last."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        orders = handler.handle(buyer_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Buyer':<12} {'Product':<24} {'Qty':>4} {'Total':>14}  Status")
    click.echo("-" * 80)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.buyer_id:<12} {dto.product_name:<24} "
            f"{dto.quantity:>4} {dto.total_price:>14}  {dto.status}"
        )


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to advance.")
def order_advance(order_id: int) -> None:
    """Move a paid order to its next fulfilment step."""
    handler = AdvanceOrderHandler(order_repo=order_repository())

    try:
        status = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {status.value}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel an unpaid order (returns its stock)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")
