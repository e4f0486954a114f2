# storefront/pricing/price_calculator.py

"""Discount arithmetic for catalog prices."""

from storefront.models.product import Product


def has_discount(discount_percent: float | None) -> bool:
    """Return True iff *discount_percent* is a positive number."""
    return discount_percent is not None and discount_percent > 0


def effective_price(
    price: float, discount_percent: float | None = 0.0
) -> float:
    """Return the price actually charged after the discount.

    A missing, zero or negative discount returns *price* untouched so
    non-discounted items never pick up floating-point drift. The
    discounted result is floored at 0 for discounts above 100%.
    """
    if discount_percent is None or not has_discount(discount_percent):
        return price
    discount = (price * discount_percent) / 100
    return max(0.0, price - discount)


def discount_amount(
    price: float, discount_percent: float | None = 0.0
) -> float:
    """Return how much the discount takes off *price*."""
    return price - effective_price(price, discount_percent)


def product_effective_price(product: Product | None) -> float:
    """Effective price of a catalog product (0 when there is none)."""
    if product is None:
        return 0.0
    return effective_price(product.price, product.discount_percent)
