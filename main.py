# main.py

"""Entry point for the storefront cart CLI."""

import argparse
import logging
import sys
from pathlib import Path

from storefront.config.logging_config import setup_logging
from storefront.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Inspect and edit the persisted storefront cart.",
    )
    parser.add_argument(
        "--storage-dir",
        default=None,
        dest="storage_dir",
        help="Directory holding cart/wishlist JSON (default: data/).",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        dest="api_url",
        help=f"Catalog API base URL (default: {Settings.API_BASE_URL}).",
    )
    areas = parser.add_subparsers(dest="area", required=True)

    # --- cart ---
    cart = areas.add_parser("cart", help="Cart commands.")
    cart_cmds = cart.add_subparsers(dest="command", required=True)

    cart_list = cart_cmds.add_parser("list", help="Show cart lines.")
    cart_list.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    cart_add = cart_cmds.add_parser("add", help="Add a product variant.")
    cart_add.add_argument("product_id", help="Catalog product id.")
    cart_add.add_argument(
        "-q", "--quantity", type=int, default=1, help="Units to add."
    )
    cart_add.add_argument("--size", default=None, help="Selected size.")
    cart_add.add_argument("--color", default=None, help="Selected colour.")

    cart_qty = cart_cmds.add_parser("qty", help="Set a line's quantity.")
    cart_qty.add_argument("key", help="Cart line key.")
    cart_qty.add_argument("quantity", type=int, help="New quantity (0 removes).")

    cart_remove = cart_cmds.add_parser("remove", help="Remove a line.")
    cart_remove.add_argument("key", help="Cart line key.")

    cart_cmds.add_parser("clear", help="Empty the cart.")

    cart_summary = cart_cmds.add_parser(
        "summary", help="Print checkout totals and order items."
    )
    cart_summary.add_argument(
        "--check-stock",
        action="store_true",
        default=False,
        dest="check_stock",
        help="Compare the cart against live catalog stock and prices.",
    )

    # --- wishlist ---
    wishlist = areas.add_parser("wishlist", help="Wishlist commands.")
    wl_cmds = wishlist.add_subparsers(dest="command", required=True)
    wl_cmds.add_parser("list", help="Show saved products.")
    wl_toggle = wl_cmds.add_parser("toggle", help="Save or unsave a product.")
    wl_toggle.add_argument("product_id", help="Catalog product id.")
    wl_cmds.add_parser(
        "cleanup", help="Drop entries for deleted catalog products."
    )

    return parser


def run(args: argparse.Namespace) -> int:
    """Build the stores for *args* and dispatch the chosen command."""
    from storefront.cart.cart_store import CartStore
    from storefront.cli import runner
    from storefront.services.catalog_client import CatalogClient
    from storefront.storage.local_storage import JsonFileStorage
    from storefront.wishlist.wishlist_store import WishlistStore

    storage_dir = Path(args.storage_dir) if args.storage_dir else None
    storage = JsonFileStorage(storage_dir)
    catalog = CatalogClient(base_url=args.api_url)

    if args.area == "cart":
        cart = CartStore(storage)
        if args.command == "list":
            return runner.cart_list(cart, args.output_format)
        if args.command == "add":
            return runner.cart_add(
                cart,
                catalog,
                args.product_id,
                args.quantity,
                args.size,
                args.color,
            )
        if args.command == "qty":
            return runner.cart_set_quantity(cart, args.key, args.quantity)
        if args.command == "remove":
            return runner.cart_remove(cart, args.key)
        if args.command == "clear":
            return runner.cart_clear(cart)
        return runner.cart_summary(cart, catalog, args.check_stock)

    wishlist = WishlistStore(storage)
    if args.command == "list":
        return runner.wishlist_list(wishlist)
    if args.command == "toggle":
        return runner.wishlist_toggle(wishlist, catalog, args.product_id)
    return runner.wishlist_cleanup(wishlist, catalog)


def main() -> None:
    """Parse arguments and run one cart/wishlist command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    try:
        exit_code = run(args)
    except Exception:
        logger.critical("Fatal error during CLI run", exc_info=True)
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
