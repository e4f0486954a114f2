# storefront/cart/errors.py

"""Typed failures raised by cart mutations.

Every error leaves the cart exactly as it was before the call. They
are user-correctable input problems and are never retried.
"""


class CartError(Exception):
    """Base class for cart rule violations."""

    def __init__(self, product_id: str, message: str) -> None:
        super().__init__(message)
        self.product_id = product_id
        self.message = message


class OutOfStockError(CartError):
    """The product has no stock at all."""

    def __init__(self, product_id: str) -> None:
        super().__init__(product_id, "This product is out of stock")
        self.available = 0


class InsufficientStockError(CartError):
    """The requested or merged quantity exceeds the available stock."""

    def __init__(
        self, product_id: str, requested: int, available: int
    ) -> None:
        super().__init__(
            product_id, f"Only {available} units available in stock"
        )
        self.requested = requested
        self.available = available


class InvalidVariantError(CartError, ValueError):
    """A required size/colour is missing or not offered by the product."""

    def __init__(
        self,
        product_id: str,
        missing: list[str] | None = None,
        invalid: dict[str, str] | None = None,
    ) -> None:
        self.missing = list(missing or [])
        self.invalid = dict(invalid or {})
        parts: list[str] = []
        if self.missing:
            parts.append(
                f"Please select {' and '.join(self.missing)}"
            )
        for attr, value in self.invalid.items():
            parts.append(f"'{value}' is not an available {attr}")
        super().__init__(product_id, "; ".join(parts))
