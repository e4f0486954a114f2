# storefront/cart/cart_store.py

"""Persisted, stock-aware shopping cart keyed by product variant."""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import replace
from typing import Any

from storefront.cart.errors import (
    InsufficientStockError,
    InvalidVariantError,
    OutOfStockError,
)
from storefront.cart.variant_key import variant_key
from storefront.config.settings import Settings
from storefront.models.cart_line import CartLine
from storefront.models.product import Product
from storefront.pricing.price_calculator import product_effective_price
from storefront.storage.local_storage import KeyValueStorage

logger = logging.getLogger("storefront.cart")

CartListener = Callable[[str, tuple[CartLine, ...]], None]

_VARIANT_FIELDS: frozenset[str] = frozenset(
    {"selected_size", "selected_color", "quantity"}
)


def check_variant(
    product_id: str,
    sizes: list[str],
    colors: list[str],
    selected_size: str | None,
    selected_color: str | None,
) -> None:
    """Raise ``InvalidVariantError`` for a missing or unknown option.

    Options are only enforced for attributes the product declares.
    """
    missing: list[str] = []
    invalid: dict[str, str] = {}
    if sizes:
        if not selected_size:
            missing.append("size")
        elif selected_size not in sizes:
            invalid["size"] = selected_size
    if colors:
        if not selected_color:
            missing.append("color")
        elif selected_color not in colors:
            invalid["color"] = selected_color
    if missing or invalid:
        raise InvalidVariantError(product_id, missing, invalid)


class CartStore:
    """Insertion-ordered cart holding at most one line per variant key.

    Every mutation builds the new line list first, persists it, and only
    then swaps it in, so a raised error leaves both memory and storage
    untouched.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = Settings.CART_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._listeners: list[CartListener] = []
        self._lines: list[CartLine] = self._load()

    # ── Persistence ──────────────────────────────────────

    def _load(self) -> list[CartLine]:
        """Rehydrate lines, skipping malformed or duplicate records."""
        lines: list[CartLine] = []
        seen: set[str] = set()
        for record in self._storage.load_records(self._storage_key):
            try:
                line = CartLine.from_dict(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping malformed cart record %r: %s", record, exc
                )
                continue
            if line.quantity <= 0:
                logger.warning(
                    "Skipping cart line %s with quantity %d",
                    line.key,
                    line.quantity,
                )
                continue
            if line.key in seen:
                logger.warning(
                    "Skipping duplicate cart line %s", line.key
                )
                continue
            seen.add(line.key)
            lines.append(line)
        logger.debug("Cart loaded with %d lines", len(lines))
        return lines

    def _commit(self, lines: list[CartLine], event: str) -> None:
        """Persist *lines*, make them current, then notify listeners."""
        self._storage.save_records(
            self._storage_key, [line.to_dict() for line in lines]
        )
        self._lines = lines
        self._notify(event)

    # ── Observers ────────────────────────────────────────

    def on_change(self, listener: CartListener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str) -> None:
        snapshot = self.lines
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                logger.error(
                    "Cart listener %r failed on '%s'",
                    listener,
                    event,
                    exc_info=True,
                )

    # ── Queries ──────────────────────────────────────────

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Copies of the current lines, in insertion order."""
        return tuple(replace(line) for line in self._lines)

    def _index_of(self, key: str) -> int | None:
        for idx, line in enumerate(self._lines):
            if line.key == key:
                return idx
        return None

    def get_line(self, key: str) -> CartLine | None:
        idx = self._index_of(key)
        return None if idx is None else replace(self._lines[idx])

    def get_total(self) -> float:
        """Sum of ``unit_price * quantity`` over all lines."""
        return sum((line.subtotal for line in self._lines), 0.0)

    def get_count(self) -> int:
        """Number of units in the cart (not distinct lines)."""
        return sum(line.quantity for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._index_of(key) is not None

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    # ── Mutations ────────────────────────────────────────

    def add_line(
        self,
        product: Product,
        quantity: int = 1,
        selected_size: str | None = None,
        selected_color: str | None = None,
    ) -> CartLine:
        """Add *quantity* units of a product variant.

        Adding a variant that is already in the cart accumulates onto
        the existing line. Raises ``OutOfStockError`` when the product
        has no stock and ``InsufficientStockError`` when the resulting
        quantity would exceed ``product.stock``.
        """
        if product.stock < 1:
            logger.info("Rejected add of %s: out of stock", product.id)
            raise OutOfStockError(product.id)
        if quantity < 1:
            raise ValueError(f"Quantity must be positive, got {quantity}")

        selected_size = selected_size or None
        selected_color = selected_color or None
        check_variant(
            product.id,
            product.sizes,
            product.colors,
            selected_size,
            selected_color,
        )

        key = variant_key(product.id, selected_size, selected_color)
        idx = self._index_of(key)
        new_lines = list(self._lines)

        if idx is not None:
            existing = self._lines[idx]
            new_total = existing.quantity + quantity
            if new_total > product.stock:
                logger.info(
                    "Rejected add of %s: %d requested, %d in stock",
                    key,
                    new_total,
                    product.stock,
                )
                raise InsufficientStockError(
                    product.id, new_total, product.stock
                )
            line = replace(
                existing, quantity=new_total, stock=product.stock
            )
            new_lines[idx] = line
            logger.info("Merged %d into %s (now %d)", quantity, key, new_total)
        else:
            if quantity > product.stock:
                logger.info(
                    "Rejected add of %s: %d requested, %d in stock",
                    key,
                    quantity,
                    product.stock,
                )
                raise InsufficientStockError(
                    product.id, quantity, product.stock
                )
            line = CartLine(
                product_id=product.id,
                name=product.name,
                unit_price=product_effective_price(product),
                quantity=quantity,
                stock=product.stock,
                original_price=product.price,
                selected_size=selected_size,
                selected_color=selected_color,
                sizes=list(product.sizes),
                colors=list(product.colors),
                image_url=product.image_url,
            )
            new_lines.append(line)
            logger.info("Added %s x%d", key, quantity)

        self._commit(new_lines, "added")
        return replace(line)

    def update_quantity(self, key: str, quantity: int) -> CartLine | None:
        """Set a line's quantity; zero or less removes the line.

        Unknown keys are ignored. Raises ``InsufficientStockError`` when
        *quantity* exceeds the stock captured on the line.
        """
        if quantity <= 0:
            self.remove_line(key)
            return None

        idx = self._index_of(key)
        if idx is None:
            logger.debug("update_quantity: no line %s", key)
            return None

        line = self._lines[idx]
        if quantity > line.stock:
            raise InsufficientStockError(
                line.product_id, quantity, line.stock
            )

        updated = replace(line, quantity=quantity)
        new_lines = list(self._lines)
        new_lines[idx] = updated
        self._commit(new_lines, "updated")
        logger.info("Set %s quantity to %d", key, quantity)
        return replace(updated)

    def update_variant(
        self,
        product_id: str,
        updates: Mapping[str, Any],
        original_line: CartLine | None = None,
    ) -> CartLine | None:
        """Change a line's size, colour and/or quantity.

        The line is located by *original_line*'s key when given, else
        by the first line for *product_id*. If the edited variant
        matches another existing line, the two are merged into that
        line and the edited one is dropped.

        Returns the resulting line, or ``None`` when nothing matched or
        the line was removed by a non-positive quantity.
        """
        unknown = set(updates) - _VARIANT_FIELDS
        if unknown:
            raise ValueError(
                f"Unsupported cart line fields: {sorted(unknown)}"
            )

        if original_line is not None:
            target_idx = self._index_of(original_line.key)
        else:
            target_idx = next(
                (
                    i
                    for i, line in enumerate(self._lines)
                    if line.product_id == product_id
                ),
                None,
            )
        if target_idx is None:
            logger.debug("update_variant: no line for %s", product_id)
            return None

        target = self._lines[target_idx]

        quantity: int | None = None
        if updates.get("quantity") is not None:
            quantity = int(updates["quantity"])
            if quantity <= 0:
                self.remove_line(target.key)
                return None
            if quantity > target.stock:
                raise InsufficientStockError(
                    target.product_id, quantity, target.stock
                )

        new_size = (
            updates["selected_size"] or None
            if "selected_size" in updates
            else target.selected_size
        )
        new_color = (
            updates["selected_color"] or None
            if "selected_color" in updates
            else target.selected_color
        )
        if "selected_size" in updates or "selected_color" in updates:
            check_variant(
                target.product_id,
                target.sizes,
                target.colors,
                new_size,
                new_color,
            )

        new_key = variant_key(target.product_id, new_size, new_color)
        collided_idx = self._index_of(new_key)

        if collided_idx is not None and collided_idx != target_idx:
            collided = self._lines[collided_idx]
            combined = collided.quantity + (
                quantity if quantity is not None else target.quantity
            )
            available = min(target.stock, collided.stock)
            if combined > available:
                raise InsufficientStockError(
                    target.product_id, combined, available
                )
            result = replace(collided, quantity=combined)
            new_lines = [
                result if i == collided_idx else line
                for i, line in enumerate(self._lines)
                if i != target_idx
            ]
            self._commit(new_lines, "updated")
            logger.info(
                "Merged %s into %s (now %d)", target.key, new_key, combined
            )
            return replace(result)

        result = replace(
            target,
            selected_size=new_size,
            selected_color=new_color,
            quantity=quantity if quantity is not None else target.quantity,
        )
        new_lines = list(self._lines)
        new_lines[target_idx] = result
        self._commit(new_lines, "updated")
        logger.info("Updated %s -> %s", target.key, new_key)
        return replace(result)

    def remove_line(self, key: str) -> CartLine | None:
        """Remove the line with *key*; absent keys are a no-op."""
        idx = self._index_of(key)
        if idx is None:
            logger.debug("remove_line: no line %s", key)
            return None
        removed = self._lines[idx]
        new_lines = [
            line for i, line in enumerate(self._lines) if i != idx
        ]
        self._commit(new_lines, "removed")
        logger.info("Removed %s", key)
        return replace(removed)

    def clear(self) -> None:
        """Empty the cart, e.g. after a successful checkout."""
        count = len(self._lines)
        self._commit([], "cleared")
        logger.info("Cart cleared (%d lines removed)", count)
