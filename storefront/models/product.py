# storefront/models/product.py

"""Catalog product snapshot consumed by the cart and wishlist."""

from dataclasses import dataclass, field
from typing import Any


def _as_float(value: Any, default: float = 0.0) -> float:
    """Coerce an API number (possibly a string or ``None``) to float."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: int = 0) -> int:
    """Coerce an API integer (possibly a string or ``None``) to int."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_options(value: Any) -> list[str]:
    """Normalise a size/colour option list, dropping blanks."""
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


@dataclass
class Product:
    """A product as returned by the storefront catalog API."""

    id: str
    name: str
    price: float
    stock: int = 0
    discount_percent: float = 0.0
    sizes: list[str] = field(default_factory=lambda: list[str]())
    colors: list[str] = field(default_factory=lambda: list[str]())
    image_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from the REST API's camelCase JSON record.

        Accepts both the Mongo ``_id`` and a plain ``id`` key.
        Raises ``ValueError`` when the record carries no id.
        """
        product_id = data.get("_id") or data.get("id")
        if not product_id:
            raise ValueError("Product record has no id")
        return cls(
            id=str(product_id),
            name=str(data.get("name") or ""),
            price=_as_float(data.get("price")),
            stock=_as_int(data.get("stock")),
            discount_percent=_as_float(data.get("discountPercent")),
            sizes=_as_options(data.get("sizes")),
            colors=_as_options(data.get("colors")),
            image_url=str(data.get("imageUrl") or ""),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Rebuild a Product from its persisted snake_case form."""
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            price=_as_float(data.get("price")),
            stock=_as_int(data.get("stock")),
            discount_percent=_as_float(data.get("discount_percent")),
            sizes=_as_options(data.get("sizes")),
            colors=_as_options(data.get("colors")),
            image_url=str(data.get("image_url", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict for persistence."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "discount_percent": self.discount_percent,
            "sizes": list(self.sizes),
            "colors": list(self.colors),
            "image_url": self.image_url,
        }
