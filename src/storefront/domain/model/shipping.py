"""Shipping details captured once per checkout."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_NAME_LENGTH = 3
MIN_PHONE_LENGTH = 10
MIN_ADDRESS_LENGTH = 10


class PaymentMethod(Enum):
    BANK_TRANSFER = "bank_transfer"
    E_WALLET = "e_wallet"
    COD = "cod"


@dataclass(frozen=True)
class ShippingInfo:
    """Buyer contact and delivery details.

    Copied onto every order created by the same checkout.
    """

    name: str
    email: str
    phone: str
    address: str
    payment_method: PaymentMethod
    notes: str | None = None

    def __post_init__(self) -> None:
        if len(self.name.strip()) < MIN_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at least {MIN_NAME_LENGTH} characters"
            )
        if not _EMAIL_RE.match(self.email.strip()):
            raise ValidationError(f"Invalid email address: {self.email!r}")
        if len(self.phone.strip()) < MIN_PHONE_LENGTH:
            raise ValidationError(
                f"Phone number must be at least {MIN_PHONE_LENGTH} digits"
            )
        if len(self.address.strip()) < MIN_ADDRESS_LENGTH:
            raise ValidationError(
                f"Address must be at least {MIN_ADDRESS_LENGTH} characters"
            )
        if not isinstance(self.payment_method, PaymentMethod):
            raise ValidationError("Choose a payment method")

    @staticmethod
    def create(
        name: str,
        email: str,
        phone: str,
        address: str,
        payment_method: str,
        notes: str | None = None,
    ) -> ShippingInfo:
        """Build from raw form input; blank notes are stored as None."""
        try:
            method = PaymentMethod(payment_method)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown payment method: {payment_method!r}"
            ) from exc
        return ShippingInfo(
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
            address=address.strip(),
            payment_method=method,
            notes=notes.strip() if notes and notes.strip() else None,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "payment_method": self.payment_method.value,
            "notes": self.notes,
        }

    @staticmethod
    def from_dict(raw: dict) -> ShippingInfo:
        return ShippingInfo(
            name=raw["name"],
            email=raw["email"],
            phone=raw["phone"],
            address=raw["address"],
            payment_method=PaymentMethod(raw["payment_method"]),
            notes=raw.get("notes"),
        )
