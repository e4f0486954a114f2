# tests/test_price_calculator.py

"""Tests for discount price arithmetic."""

import unittest

from storefront.models.product import Product
from storefront.pricing.price_calculator import (
    discount_amount,
    effective_price,
    has_discount,
    product_effective_price,
)


class TestEffectivePrice(unittest.TestCase):
    """effective_price unit tests."""

    def test_quarter_discount(self) -> None:
        self.assertEqual(effective_price(100, 25), 75)

    def test_zero_discount_returns_price_unchanged(self) -> None:
        """No discount must not touch the price at all."""
        self.assertEqual(effective_price(100, 0), 100)
        self.assertEqual(effective_price(19.99, 0), 19.99)

    def test_missing_discount(self) -> None:
        self.assertEqual(effective_price(42.5), 42.5)
        self.assertEqual(effective_price(42.5, None), 42.5)

    def test_negative_discount_is_no_discount(self) -> None:
        self.assertEqual(effective_price(80, -10), 80)

    def test_full_discount_is_free(self) -> None:
        self.assertEqual(effective_price(50, 100), 0)

    def test_over_hundred_percent_floors_at_zero(self) -> None:
        """Out-of-range discounts never produce a negative price."""
        self.assertEqual(effective_price(50, 150), 0)

    def test_fractional_discount(self) -> None:
        self.assertAlmostEqual(effective_price(20, 12.5), 17.5)

    def test_zero_price(self) -> None:
        self.assertEqual(effective_price(0, 30), 0)


class TestHasDiscount(unittest.TestCase):
    """has_discount unit tests."""

    def test_positive(self) -> None:
        self.assertTrue(has_discount(10))
        self.assertTrue(has_discount(0.5))

    def test_zero_negative_and_none(self) -> None:
        self.assertFalse(has_discount(0))
        self.assertFalse(has_discount(-5))
        self.assertFalse(has_discount(None))


class TestProductHelpers(unittest.TestCase):
    """Product-level helpers."""

    def test_product_effective_price(self) -> None:
        product = Product(
            id="p1", name="Shirt", price=40.0, discount_percent=25
        )
        self.assertEqual(product_effective_price(product), 30.0)

    def test_product_effective_price_none(self) -> None:
        self.assertEqual(product_effective_price(None), 0.0)

    def test_discount_amount(self) -> None:
        self.assertEqual(discount_amount(100, 25), 25)
        self.assertEqual(discount_amount(100, 0), 0)


if __name__ == "__main__":
    unittest.main()
