"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


# ---------------------------------------------------------------------------
# Catalog / stock
# ---------------------------------------------------------------------------


class ProductNotFoundError(EntityNotFoundError):
    """A cart line or request references a product that no longer exists."""

    def __init__(self, product_id: str, label: str | None = None) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found: '{label or product_id}'")


class InvalidProductReferenceError(ValidationError):
    """A product identifier is blank or malformed."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Invalid product reference for '{label}'")


class InvalidQuantityError(ValidationError):
    """A line quantity is not a positive integer."""

    def __init__(self, label: str, quantity: object) -> None:
        self.label = label
        self.quantity = quantity
        super().__init__(f"Invalid quantity {quantity!r} for '{label}'")


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the stock currently on hand."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {requested}, have {available} available)"
        )


class OutOfStockError(ValidationError):
    """Adding to the cart would exceed the product's stock."""

    def __init__(self, product_name: str, available: int) -> None:
        self.product_name = product_name
        self.available = available
        super().__init__(f"Only {available} of {product_name} in stock")


# ---------------------------------------------------------------------------
# Stores and transport
# ---------------------------------------------------------------------------


class StoreError(DomainException):
    """A backing store or remote service could not complete the call."""


class OperationTimeoutError(StoreError):
    """A call to a backing store or remote service timed out."""


class CorruptCartDataError(StoreError):
    """Persisted cart data could not be decoded."""


class ProductLookupError(StoreError):
    """The catalog could not be queried while validating a cart line."""

    def __init__(self, product_name: str, cause: StoreError) -> None:
        self.cause = cause
        super().__init__(f"Failed to validate {product_name}: {cause}")


# ---------------------------------------------------------------------------
# Checkout workflow
# ---------------------------------------------------------------------------


class CheckoutError(DomainException):
    """Checkout was aborted; the message is safe to show to the buyer."""


class EmptyCartError(CheckoutError):
    def __init__(self) -> None:
        super().__init__("Cart is empty")


class UnauthenticatedError(CheckoutError):
    def __init__(self) -> None:
        super().__init__("You must be signed in to check out")


class CheckoutValidationError(CheckoutError):
    """One or more cart lines failed validation; nothing was committed."""

    def __init__(self, failures: list[DomainException]) -> None:
        self.failures = list(failures)
        details = ", ".join(str(f) for f in self.failures)
        super().__init__(f"Some products cannot be processed: {details}")


class OrderPersistenceError(DomainException):
    """An order row could not be inserted."""


class ReservationError(DomainException):
    """Stock could not be decremented for an already inserted order."""


class CheckoutCommitError(CheckoutError):
    """A line failed during the commit phase.

    Orders committed before the failing line are kept; their ids are in
    ``committed_order_ids``.
    """

    def __init__(
        self,
        product_name: str,
        cause: DomainException,
        committed_order_ids: list[int] | None = None,
    ) -> None:
        self.product_name = product_name
        self.cause = cause
        self.committed_order_ids = list(committed_order_ids or [])
        super().__init__(f"Failed to create order for {product_name}: {cause}")

    @property
    def is_partial(self) -> bool:
        return bool(self.committed_order_ids)


# ---------------------------------------------------------------------------
# Payment
# ---------------------------------------------------------------------------


class PaymentGatewayError(DomainException):
    """The payment gateway rejected the request or returned an error."""


class PaymentInitiationError(CheckoutError):
    """A hosted checkout session could not be started; orders were cancelled."""


class InvalidPaymentCallbackError(DomainException):
    """A payment callback failed verification."""
