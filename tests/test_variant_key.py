# tests/test_variant_key.py

"""Tests for cart line identity keys."""

import unittest

from storefront.cart.variant_key import NO_COLOR, NO_SIZE, variant_key


class TestVariantKey(unittest.TestCase):
    """variant_key unit tests."""

    def test_full_variant(self) -> None:
        self.assertEqual(variant_key("p1", "M", "Red"), "p1_M_Red")

    def test_missing_attributes_use_sentinels(self) -> None:
        self.assertEqual(
            variant_key("p1"), f"p1_{NO_SIZE}_{NO_COLOR}"
        )

    def test_none_and_empty_collapse(self) -> None:
        """None and empty string produce the same key."""
        self.assertEqual(
            variant_key("p1", None, None), variant_key("p1", "", "")
        )

    def test_size_only(self) -> None:
        self.assertEqual(variant_key("p1", "S"), f"p1_S_{NO_COLOR}")

    def test_color_only(self) -> None:
        self.assertEqual(
            variant_key("p1", None, "Blue"), f"p1_{NO_SIZE}_Blue"
        )

    def test_distinct_variants_distinct_keys(self) -> None:
        self.assertNotEqual(
            variant_key("p1", "S", "Red"), variant_key("p1", "M", "Red")
        )
        self.assertNotEqual(
            variant_key("p1", "S", "Red"), variant_key("p2", "S", "Red")
        )


if __name__ == "__main__":
    unittest.main()
