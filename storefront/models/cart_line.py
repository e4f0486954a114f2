# storefront/models/cart_line.py

"""Cart line data model: one purchasable variant held in the cart."""

from dataclasses import dataclass, field
from typing import Any

from storefront.cart.variant_key import variant_key


@dataclass
class CartLine:
    """A single product variant in the cart.

    ``unit_price`` is the effective price captured when the line was
    added and ``stock`` is the stock figure seen at that moment.
    Neither is refreshed from the live catalog afterwards.
    """

    product_id: str
    name: str
    unit_price: float
    quantity: int
    stock: int
    original_price: float = 0.0
    selected_size: str | None = None
    selected_color: str | None = None
    sizes: list[str] = field(default_factory=lambda: list[str]())
    colors: list[str] = field(default_factory=lambda: list[str]())
    image_url: str = ""

    @property
    def key(self) -> str:
        """Variant identity of this line."""
        return variant_key(
            self.product_id, self.selected_size, self.selected_color
        )

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartLine":
        """Rebuild a line from its persisted form.

        Raises ``KeyError``/``ValueError``/``TypeError`` on malformed
        records so the caller can skip them.
        """
        return cls(
            product_id=str(data["product_id"]),
            name=str(data.get("name", "")),
            unit_price=float(data["unit_price"]),
            quantity=int(data["quantity"]),
            stock=int(data["stock"]),
            original_price=float(data.get("original_price") or 0.0),
            selected_size=data.get("selected_size") or None,
            selected_color=data.get("selected_color") or None,
            sizes=list(data.get("sizes") or []),
            colors=list(data.get("colors") or []),
            image_url=str(data.get("image_url", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict for persistence."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "original_price": self.original_price,
            "quantity": self.quantity,
            "stock": self.stock,
            "selected_size": self.selected_size,
            "selected_color": self.selected_color,
            "sizes": list(self.sizes),
            "colors": list(self.colors),
            "image_url": self.image_url,
        }
