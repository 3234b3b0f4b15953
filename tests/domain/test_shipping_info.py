"""Unit tests for ShippingInfo validation."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.shipping import PaymentMethod, ShippingInfo


def _create(**overrides) -> ShippingInfo:
    fields = dict(
        name="Siti Rahma",
        email="siti@example.com",
        phone="081234567890",
        address="Jl. Merdeka No. 10, Bandung",
        payment_method="e_wallet",
        notes=None,
    )
    fields.update(overrides)
    return ShippingInfo.create(**fields)


class TestCreate:

    def test_happy_path(self):
        info = _create(notes="Leave at the gate")
        assert info.payment_method is PaymentMethod.E_WALLET
        assert info.notes == "Leave at the gate"

    def test_strips_input(self):
        info = _create(name="  Siti Rahma  ", email=" siti@example.com ")
        assert info.name == "Siti Rahma"
        assert info.email == "siti@example.com"

    def test_blank_notes_stored_as_none(self):
        assert _create(notes="   ").notes is None

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(ValidationError, match="Unknown payment method"):
            _create(payment_method="cheque")


class TestValidation:

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError, match="Name"):
            _create(name="Al")

    @pytest.mark.parametrize("email", ["", "siti", "siti@", "siti@example", "si ti@example.com"])
    def test_bad_email_rejected(self, email):
        with pytest.raises(ValidationError, match="email"):
            _create(email=email)

    def test_short_phone_rejected(self):
        with pytest.raises(ValidationError, match="Phone"):
            _create(phone="0812")

    def test_short_address_rejected(self):
        with pytest.raises(ValidationError, match="Address"):
            _create(address="Bandung")


class TestSerialization:

    def test_dict_round_trip(self):
        info = _create(payment_method="cod", notes="Call first")
        assert ShippingInfo.from_dict(info.to_dict()) == info
