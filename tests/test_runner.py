# tests/test_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import unittest
from unittest.mock import MagicMock, patch

from storefront.cart.cart_store import CartStore
from storefront.cli import runner
from storefront.models.product import Product
from storefront.storage.local_storage import MemoryStorage
from storefront.wishlist.wishlist_store import WishlistStore


def _product(product_id: str = "p1", stock: int = 5) -> Product:
    return Product(
        id=product_id, name=f"Product {product_id}", price=12.0, stock=stock
    )


class _RunnerTestCase(unittest.TestCase):
    """Fresh in-memory stores and a mocked catalog per test."""

    def setUp(self) -> None:
        storage = MemoryStorage()
        self.cart = CartStore(storage)
        self.wishlist = WishlistStore(storage)
        self.catalog = MagicMock()
        self.catalog.get_product.return_value = _product()
        self.catalog.fetch_delivery_price.return_value = 3.0


class TestCartCommands(_RunnerTestCase):
    """cart_* command functions."""

    def test_add_success(self) -> None:
        code = runner.cart_add(self.cart, self.catalog, "p1", 2)
        self.assertEqual(code, 0)
        self.assertEqual(self.cart.get_count(), 2)
        self.catalog.get_product.assert_called_once_with("p1")

    def test_add_unknown_product(self) -> None:
        self.catalog.get_product.return_value = None
        self.assertEqual(runner.cart_add(self.cart, self.catalog, "x"), 1)
        self.assertEqual(len(self.cart), 0)

    def test_add_over_stock(self) -> None:
        self.catalog.get_product.return_value = _product(stock=1)
        self.assertEqual(
            runner.cart_add(self.cart, self.catalog, "p1", 2), 1
        )
        self.assertEqual(len(self.cart), 0)

    def test_add_invalid_quantity(self) -> None:
        self.assertEqual(
            runner.cart_add(self.cart, self.catalog, "p1", 0), 1
        )

    def test_list_json(self) -> None:
        self.cart.add_line(_product(), 2)
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = runner.cart_list(self.cart, "json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(data[0]["product_id"], "p1")
        self.assertEqual(data[0]["quantity"], 2)

    def test_list_table(self) -> None:
        self.cart.add_line(_product(), 1)
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = runner.cart_list(self.cart)
        self.assertEqual(code, 0)
        # Narrow tables may wrap the name across rows
        self.assertIn("Product", out.getvalue())

    def test_set_quantity(self) -> None:
        line = self.cart.add_line(_product(), 1)
        self.assertEqual(runner.cart_set_quantity(self.cart, line.key, 3), 0)
        self.assertEqual(self.cart.get_count(), 3)

    def test_set_quantity_zero_removes(self) -> None:
        line = self.cart.add_line(_product(), 1)
        self.assertEqual(runner.cart_set_quantity(self.cart, line.key, 0), 0)
        self.assertEqual(len(self.cart), 0)

    def test_set_quantity_over_stock(self) -> None:
        line = self.cart.add_line(_product(stock=2), 1)
        self.assertEqual(runner.cart_set_quantity(self.cart, line.key, 9), 1)
        self.assertEqual(self.cart.get_count(), 1)

    def test_set_quantity_unknown_key(self) -> None:
        self.assertEqual(runner.cart_set_quantity(self.cart, "nope", 1), 1)

    def test_remove_and_clear(self) -> None:
        line = self.cart.add_line(_product("a"), 1)
        self.cart.add_line(_product("b"), 1)
        self.assertEqual(runner.cart_remove(self.cart, line.key), 0)
        self.assertEqual(runner.cart_remove(self.cart, line.key), 0)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(runner.cart_clear(self.cart), 0)
        self.assertEqual(len(self.cart), 0)

    def test_summary_payload(self) -> None:
        self.cart.add_line(_product(), 2)
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = runner.cart_summary(self.cart, self.catalog)
        self.assertEqual(code, 0)
        payload = json.loads(out.getvalue())
        self.assertEqual(payload["itemsPrice"], 24.0)
        self.assertEqual(payload["deliveryPrice"], 3.0)
        self.assertEqual(payload["totalPrice"], 27.0)
        self.assertEqual(payload["orderItems"][0]["product"], "p1")

    def test_summary_empty_cart(self) -> None:
        self.assertEqual(runner.cart_summary(self.cart, self.catalog), 1)

    def test_summary_check_stock_flags_stale(self) -> None:
        self.cart.add_line(_product(), 2)
        self.catalog.fetch_products.return_value = [_product(stock=1)]
        with patch("sys.stdout", new_callable=io.StringIO):
            code = runner.cart_summary(
                self.cart, self.catalog, check_stock=True
            )
        self.assertEqual(code, 1)

    def test_summary_check_stock_catalog_down(self) -> None:
        self.cart.add_line(_product(), 1)
        self.catalog.fetch_products.return_value = None
        with patch("sys.stdout", new_callable=io.StringIO):
            code = runner.cart_summary(
                self.cart, self.catalog, check_stock=True
            )
        self.assertEqual(code, 1)


class TestWishlistCommands(_RunnerTestCase):
    """wishlist_* command functions."""

    def test_toggle_adds_then_removes(self) -> None:
        self.assertEqual(
            runner.wishlist_toggle(self.wishlist, self.catalog, "p1"), 0
        )
        self.assertTrue(self.wishlist.contains("p1"))
        self.assertEqual(
            runner.wishlist_toggle(self.wishlist, self.catalog, "p1"), 0
        )
        self.assertFalse(self.wishlist.contains("p1"))
        self.catalog.get_product.assert_called_once_with("p1")

    def test_toggle_unknown_product(self) -> None:
        self.catalog.get_product.return_value = None
        self.assertEqual(
            runner.wishlist_toggle(self.wishlist, self.catalog, "x"), 1
        )

    def test_cleanup(self) -> None:
        self.wishlist.add(_product("a"))
        self.wishlist.add(_product("b"))
        self.catalog.fetch_product_ids.return_value = {"a"}
        self.assertEqual(
            runner.wishlist_cleanup(self.wishlist, self.catalog), 0
        )
        self.assertEqual([p.id for p in self.wishlist.items], ["a"])

    def test_cleanup_catalog_down_keeps_entries(self) -> None:
        self.wishlist.add(_product("a"))
        self.catalog.fetch_product_ids.return_value = None
        self.assertEqual(
            runner.wishlist_cleanup(self.wishlist, self.catalog), 1
        )
        self.assertEqual(len(self.wishlist), 1)

    def test_list(self) -> None:
        self.wishlist.add(_product("a"))
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            self.assertEqual(runner.wishlist_list(self.wishlist), 0)
        self.assertIn("Product a", out.getvalue())


if __name__ == "__main__":
    unittest.main()
