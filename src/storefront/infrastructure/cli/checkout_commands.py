"""CLI command for checking out a session's cart."""

from __future__ import annotations

import click

from storefront.domain.exceptions import CheckoutCommitError, DomainException
from storefront.domain.model.shipping import PaymentMethod, ShippingInfo
from storefront.infrastructure.bootstrap import place_order_handler
from storefront.infrastructure.cli.cart_commands import open_cart_session, session_option


@click.command("checkout")
@session_option
@click.option("--buyer", "buyer_id", required=True, help="Authenticated buyer ID.")
@click.option("--name", required=True, help="Recipient name.")
@click.option("--email", required=True, help="Recipient email.")
@click.option("--phone", required=True, help="Recipient phone number.")
@click.option("--address", required=True, help="Delivery address.")
@click.option(
    "--payment-method",
    required=True,
    type=click.Choice([m.value for m in PaymentMethod]),
    help="How the buyer pays.",
)
@click.option("--notes", default=None, help="Optional delivery notes.")
def checkout(
    session_key: str,
    buyer_id: str,
    name: str,
    email: str,
    phone: str,
    address: str,
    payment_method: str,
    notes: str | None,
) -> None:
    """Turn the cart into orders and start payment."""
    service = open_cart_session(session_key)

    try:
        shipping = ShippingInfo.create(
            name=name,
            email=email,
            phone=phone,
            address=address,
            payment_method=payment_method,
            notes=notes,
        )
        result = place_order_handler().handle(
            lines=list(service.cart.lines),
            buyer_id=buyer_id,
            shipping_info=shipping,
        )
    except CheckoutCommitError as exc:
        if exc.is_partial:
            ids = ", ".join(f"#{i}" for i in exc.committed_order_ids)
            click.echo(f"Orders already placed: {ids}", err=True)
        raise click.ClickException(f"{exc}. Please try again.")
    except DomainException as exc:
        raise click.ClickException(f"{exc}. Please try again.")

    click.echo(f"Order #{result.order_id} placed ({len(result.order_ids)} order(s)).")

    if result.requires_redirect:
        # The cart is cleared when the buyer comes back from the gateway.
        click.echo(f"Complete payment at: {result.redirect_url}")
        return

    service.clear()
    click.echo("Payment received. Thank you for your order!")
