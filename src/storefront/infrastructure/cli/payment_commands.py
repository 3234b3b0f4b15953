"""CLI commands for the hosted payment return leg."""

from __future__ import annotations

import click

from storefront.application.reconcile_payment import (
    PaymentCallbackHandler,
    PaymentReturnHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    callback_verifier,
    cart_repository,
    order_repository,
)
from storefront.infrastructure.cli.cart_commands import session_option
from storefront.infrastructure.config import ConfigurationError


@click.command("return")
@session_option
def payment_return(session_key: str) -> None:
    """Buyer came back from the gateway's success page."""
    handler = PaymentReturnHandler(cart_repo=cart_repository())
    handler.handle(session_key)
    click.echo("Payment complete. Thank you for shopping with us!")


@click.command("callback")
@click.option("--payload", required=True, help="Raw callback body from the gateway.")
@click.option("--signature", required=True, help="Signature header sent with the callback.")
def payment_callback(payload: str, signature: str) -> None:
    """Apply a gateway payment callback."""
    try:
        handler = PaymentCallbackHandler(
            order_repo=order_repository(),
            verifier=callback_verifier(),
        )
        updated = handler.handle(payload, signature)
    except (DomainException, ConfigurationError) as exc:
        raise click.ClickException(str(exc))

    if not updated:
        click.echo("No orders changed.")
        return
    click.echo("Marked paid: " + ", ".join(f"#{i}" for i in updated))
