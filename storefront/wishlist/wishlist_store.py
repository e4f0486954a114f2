# storefront/wishlist/wishlist_store.py

"""Persisted wishlist of saved product snapshots."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from storefront.config.settings import Settings
from storefront.models.product import Product
from storefront.storage.local_storage import KeyValueStorage

logger = logging.getLogger("storefront.wishlist")

WishlistListener = Callable[[str, tuple[Product, ...]], None]


class WishlistStore:
    """Ordered set of products, one entry per product id."""

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = Settings.WISHLIST_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._listeners: list[WishlistListener] = []
        self._items: list[Product] = self._load()

    def _load(self) -> list[Product]:
        items: list[Product] = []
        seen: set[str] = set()
        for record in self._storage.load_records(self._storage_key):
            try:
                product = Product.from_dict(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping malformed wishlist record %r: %s",
                    record,
                    exc,
                )
                continue
            if product.id in seen:
                continue
            seen.add(product.id)
            items.append(product)
        return items

    def _commit(self, items: list[Product], event: str) -> None:
        self._storage.save_records(
            self._storage_key, [p.to_dict() for p in items]
        )
        self._items = items
        snapshot = self.items
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                logger.error(
                    "Wishlist listener %r failed on '%s'",
                    listener,
                    event,
                    exc_info=True,
                )

    def on_change(
        self, listener: WishlistListener
    ) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def items(self) -> tuple[Product, ...]:
        return tuple(replace(p) for p in self._items)

    def contains(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, product: Product) -> bool:
        """Save *product*; returns False if it is already present."""
        if self.contains(product.id):
            logger.info("Product %s already in wishlist", product.id)
            return False
        self._commit([*self._items, replace(product)], "added")
        logger.info("Added %s to wishlist", product.id)
        return True

    def remove(self, product_id: str) -> bool:
        """Drop *product_id*; returns False if it was not saved."""
        if not self.contains(product_id):
            return False
        self._commit(
            [p for p in self._items if p.id != product_id], "removed"
        )
        logger.info("Removed %s from wishlist", product_id)
        return True

    def toggle(self, product: Product) -> bool:
        """Add or remove *product*; returns whether it is now saved."""
        if self.contains(product.id):
            self.remove(product.id)
            return False
        self.add(product)
        return True

    def cleanup(self, existing_product_ids: Iterable[str]) -> bool:
        """Drop entries whose product no longer exists in the catalog.

        *existing_product_ids* is the authoritative set of live ids.
        Returns True when at least one entry was removed.
        """
        valid_ids = set(existing_product_ids)
        kept = [p for p in self._items if p.id in valid_ids]
        if len(kept) == len(self._items):
            return False
        removed = len(self._items) - len(kept)
        self._commit(kept, "cleaned")
        logger.info("Wishlist cleanup removed %d stale entries", removed)
        return True

    def clear(self) -> None:
        self._commit([], "cleaned")
