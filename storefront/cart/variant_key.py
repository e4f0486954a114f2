# storefront/cart/variant_key.py

"""Cart line identity derived from product id, size and colour."""

NO_SIZE = "no-size"
NO_COLOR = "no-color"


def variant_key(
    product_id: str,
    selected_size: str | None = None,
    selected_color: str | None = None,
) -> str:
    """Return the identity string for a product variant.

    ``None`` and the empty string both normalise to the sentinel, so
    ``variant_key("p1")`` and ``variant_key("p1", "", None)`` are equal.
    """
    return (
        f"{product_id}_{selected_size or NO_SIZE}"
        f"_{selected_color or NO_COLOR}"
    )
