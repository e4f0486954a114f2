# storefront/cli/runner.py

"""Headless CLI commands for the persisted cart and wishlist."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from storefront.cart.cart_store import CartStore
from storefront.cart.errors import CartError
from storefront.config.settings import Settings
from storefront.models.cart_line import CartLine
from storefront.models.product import Product
from storefront.pricing.price_calculator import (
    has_discount,
    product_effective_price,
)
from storefront.services.catalog_client import CatalogClient
from storefront.services.checkout import (
    build_order_items,
    find_stale_lines,
    summarize,
)
from storefront.wishlist.wishlist_store import WishlistStore

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _money(amount: float) -> str:
    return f"{Settings.CURRENCY} {amount:,.2f}"


def _print_cart_table(lines: tuple[CartLine, ...]) -> None:
    """Render cart lines as a Rich table on stdout."""
    table = Table(
        title="Cart",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Key", style="dim", overflow="fold")
    table.add_column("Name", max_width=40)
    table.add_column("Size", justify="center")
    table.add_column("Color", justify="center")
    table.add_column("Qty", justify="right")
    table.add_column("Unit", justify="right", style="green")
    table.add_column("Subtotal", justify="right", style="green")

    for idx, line in enumerate(lines, 1):
        table.add_row(
            str(idx),
            line.key,
            line.name[:40],
            line.selected_size or "—",
            line.selected_color or "—",
            str(line.quantity),
            _money(line.unit_price),
            _money(line.subtotal),
        )

    Console().print(table)


def _print_wishlist_table(items: tuple[Product, ...]) -> None:
    table = Table(
        title="Wishlist",
        show_lines=True,
        title_style="bold magenta",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")

    for idx, p in enumerate(items, 1):
        price = _money(product_effective_price(p))
        if has_discount(p.discount_percent):
            price += f" (-{p.discount_percent:g}%)"
        table.add_row(
            str(idx),
            p.id,
            p.name[:50],
            price,
            str(p.stock) if p.stock > 0 else "[red]out[/red]",
        )

    Console().print(table)


# ── Cart commands ────────────────────────────────────────


def cart_list(cart: CartStore, output_format: str = "table") -> int:
    """Print the cart as a table or JSON."""
    lines = cart.lines
    if output_format == "json":
        json.dump(
            [line.to_dict() for line in lines],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    if not lines:
        _err.print("[yellow]Cart is empty.[/yellow]")
        return 0
    _print_cart_table(lines)
    _err.print(
        f"[bold]{cart.get_count()} items[/bold], "
        f"total {_money(cart.get_total())}"
    )
    return 0


def cart_add(
    cart: CartStore,
    catalog: CatalogClient,
    product_id: str,
    quantity: int = 1,
    size: str | None = None,
    color: str | None = None,
) -> int:
    """Look up a product in the catalog and add it to the cart."""
    product = catalog.get_product(product_id)
    if product is None:
        _err.print(f"[red]Product not found: {product_id}[/red]")
        return 1

    try:
        line = cart.add_line(product, quantity, size, color)
    except CartError as exc:
        _err.print(f"[red]{exc.message}[/red]")
        return 1
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    _err.print(
        f"[green]✓ {line.name} x{line.quantity} in cart[/green] "
        f"[dim]({line.key})[/dim]"
    )
    return 0


def cart_set_quantity(cart: CartStore, key: str, quantity: int) -> int:
    if key not in cart:
        _err.print(f"[yellow]No cart line {key}[/yellow]")
        return 1
    try:
        line = cart.update_quantity(key, quantity)
    except CartError as exc:
        _err.print(f"[red]{exc.message}[/red]")
        return 1

    if line is None:
        _err.print(f"[green]✓ Removed {key}[/green]")
    else:
        _err.print(f"[green]✓ {key} quantity set to {line.quantity}[/green]")
    return 0


def cart_remove(cart: CartStore, key: str) -> int:
    removed = cart.remove_line(key)
    if removed is None:
        _err.print(f"[yellow]No cart line {key}[/yellow]")
    else:
        _err.print(f"[green]✓ Removed {removed.name}[/green]")
    return 0


def cart_clear(cart: CartStore) -> int:
    count = len(cart)
    cart.clear()
    _err.print(f"[green]✓ Cart cleared ({count} lines)[/green]")
    return 0


def cart_summary(
    cart: CartStore,
    catalog: CatalogClient | None = None,
    check_stock: bool = False,
) -> int:
    """Print order totals and the order-items payload as JSON.

    With *check_stock*, live catalog data is compared against the cart
    snapshots and the command fails when any line is stale.
    """
    if not len(cart):
        _err.print("[yellow]Cart is empty.[/yellow]")
        return 1

    delivery = catalog.fetch_delivery_price() if catalog else 0.0
    summary = summarize(cart, delivery)

    exit_code = 0
    if check_stock and catalog is not None:
        live = catalog.fetch_products()
        if live is None:
            _err.print("[red]Catalog unavailable, stock not checked[/red]")
            exit_code = 1
        else:
            for stale in find_stale_lines(cart, live):
                if stale.reason == "missing":
                    msg = "no longer available"
                elif stale.reason == "stock":
                    msg = f"only {stale.live_stock} left in stock"
                else:
                    msg = (
                        f"price changed {_money(stale.cart_price or 0.0)}"
                        f" → {_money(stale.live_price or 0.0)}"
                    )
                _err.print(f"[red]{stale.key}: {msg}[/red]")
                exit_code = 1

    payload = {
        "orderItems": build_order_items(cart),
        "itemsPrice": summary.items_price,
        "deliveryPrice": summary.delivery_price,
        "totalPrice": summary.total_price,
    }
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    _err.print(
        f"[bold]{summary.item_count} items in {summary.line_count} lines"
        f"[/bold], total {_money(summary.total_price)}"
    )
    return exit_code


# ── Wishlist commands ────────────────────────────────────


def wishlist_list(wishlist: WishlistStore) -> int:
    items = wishlist.items
    if not items:
        _err.print("[yellow]Wishlist is empty.[/yellow]")
        return 0
    _print_wishlist_table(items)
    return 0


def wishlist_toggle(
    wishlist: WishlistStore, catalog: CatalogClient, product_id: str
) -> int:
    """Save or unsave a product by id."""
    if wishlist.contains(product_id):
        wishlist.remove(product_id)
        _err.print(f"[green]✓ Removed {product_id} from wishlist[/green]")
        return 0

    product = catalog.get_product(product_id)
    if product is None:
        _err.print(f"[red]Product not found: {product_id}[/red]")
        return 1
    wishlist.add(product)
    _err.print(f"[green]✓ Added {product.name} to wishlist[/green]")
    return 0


def wishlist_cleanup(
    wishlist: WishlistStore, catalog: CatalogClient
) -> int:
    """Drop wishlist entries for products removed from the catalog."""
    ids = catalog.fetch_product_ids()
    if ids is None:
        _err.print("[red]Catalog unavailable, wishlist left as is[/red]")
        return 1
    before = len(wishlist)
    if wishlist.cleanup(ids):
        _err.print(
            f"[green]✓ Removed {before - len(wishlist)} stale entries[/green]"
        )
    else:
        _err.print("[dim]Wishlist already up to date[/dim]")
    return 0
