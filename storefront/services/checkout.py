# storefront/services/checkout.py

"""Read-only checkout preparation on top of a CartStore."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from storefront.cart.cart_store import CartStore
from storefront.models.product import Product
from storefront.pricing.price_calculator import product_effective_price

logger = logging.getLogger("storefront.checkout")

# Prices closer than this are considered unchanged
_PRICE_EPSILON = 0.005


@dataclass
class OrderSummary:
    """Totals shown on the checkout review screen."""

    items_price: float
    delivery_price: float
    total_price: float
    item_count: int
    line_count: int


@dataclass
class StaleLine:
    """A cart line whose snapshot no longer matches the live catalog."""

    key: str
    product_id: str
    reason: str  # "missing", "stock", "price"
    cart_quantity: int
    live_stock: int | None = None
    cart_price: float | None = None
    live_price: float | None = None


def build_order_items(cart: CartStore) -> list[dict[str, Any]]:
    """Cart lines in the order API's ``orderItems`` shape."""
    items: list[dict[str, Any]] = []
    for line in cart.lines:
        item: dict[str, Any] = {
            "product": line.product_id,
            "name": line.name,
            "quantity": line.quantity,
            "price": line.unit_price,
            "imageUrl": line.image_url,
        }
        if line.selected_size:
            item["selectedSize"] = line.selected_size
        if line.selected_color:
            item["selectedColor"] = line.selected_color
        items.append(item)
    return items


def summarize(cart: CartStore, delivery_price: float = 0.0) -> OrderSummary:
    items_price = cart.get_total()
    return OrderSummary(
        items_price=items_price,
        delivery_price=delivery_price,
        total_price=items_price + delivery_price,
        item_count=cart.get_count(),
        line_count=len(cart),
    )


def find_stale_lines(
    cart: CartStore, live_products: Iterable[Product]
) -> list[StaleLine]:
    """Compare cart snapshots against live catalog data.

    Reports lines whose product is gone, whose quantity now exceeds the
    live stock, or whose captured unit price differs from the live
    effective price. The cart itself is not modified.
    """
    live = {p.id: p for p in live_products}
    stale: list[StaleLine] = []

    for line in cart.lines:
        product = live.get(line.product_id)
        if product is None:
            stale.append(
                StaleLine(
                    key=line.key,
                    product_id=line.product_id,
                    reason="missing",
                    cart_quantity=line.quantity,
                )
            )
            continue

        if line.quantity > product.stock:
            stale.append(
                StaleLine(
                    key=line.key,
                    product_id=line.product_id,
                    reason="stock",
                    cart_quantity=line.quantity,
                    live_stock=product.stock,
                )
            )

        live_price = product_effective_price(product)
        if abs(live_price - line.unit_price) > _PRICE_EPSILON:
            stale.append(
                StaleLine(
                    key=line.key,
                    product_id=line.product_id,
                    reason="price",
                    cart_quantity=line.quantity,
                    cart_price=line.unit_price,
                    live_price=live_price,
                )
            )

    if stale:
        logger.warning("Found %d stale cart lines", len(stale))
    return stale
