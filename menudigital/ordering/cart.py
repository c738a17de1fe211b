"""
Shopping Cart

In-memory collection of line items for one tenant. Items are keyed by
product id and kept in insertion order; quantities are always >= 1.

Totals are derived on every read.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    """Product fields copied into the cart at the time it was added."""
    id: str
    name: str
    price: float
    description: Optional[str] = None
    image: Optional[str] = None
    category_id: Optional[str] = None

    @classmethod
    def from_model(cls, product: Any) -> "ProductSnapshot":
        """Build a snapshot from any object exposing the product attributes."""
        return cls(
            id=str(product.id),
            name=product.name,
            price=float(product.price),
            description=product.description,
            image=product.image,
            category_id=product.category_id,
        )


@dataclass
class CartItem:
    """A product snapshot plus a quantity."""
    product: ProductSnapshot
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        """Flat record: product fields plus `quantity`."""
        data = asdict(self.product)
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        quantity = int(data.get("quantity", 1))
        if quantity < 1:
            raise ValueError(f"Invalid quantity {quantity} for product {data.get('id')}")
        product = ProductSnapshot(
            id=str(data["id"]),
            name=data["name"],
            price=float(data["price"]),
            description=data.get("description"),
            image=data.get("image"),
            category_id=data.get("category_id"),
        )
        return cls(product=product, quantity=quantity)


@dataclass
class Cart:
    """Ordered line items, unique by product id."""
    items: list[CartItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def get(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_item(self, product: ProductSnapshot) -> CartItem:
        """Insert with quantity 1, or bump the existing line by one."""
        existing = self.get(product.id)
        if existing:
            existing.quantity += 1
            return existing

        item = CartItem(product=product, quantity=1)
        self.items.append(item)
        return item

    def update_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        """
        Add `delta` to the matching line, clamped at zero.

        A line that reaches zero is dropped. Unknown products are ignored.

        Returns:
            The updated item, or None when it was removed or not present
        """
        item = self.get(product_id)
        if item is None:
            logger.debug(f"update_quantity ignored, {product_id} not in cart")
            return None

        item.quantity = max(0, item.quantity + delta)
        if item.quantity == 0:
            self.items = [i for i in self.items if i.quantity > 0]
            return None
        return item

    def remove_item(self, product_id: str) -> bool:
        """Drop the line whatever its quantity. Returns whether it existed."""
        before = len(self.items)
        self.items = [i for i in self.items if i.product_id != product_id]
        return len(self.items) != before

    def clear(self) -> None:
        self.items = []

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    def total(self) -> float:
        return sum((item.line_total for item in self.items), 0.0)

    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, records: list[dict[str, Any]]) -> "Cart":
        """
        Rebuild a cart from its stored records.

        Raises:
            ValueError: If `records` is not a list of item objects
        """
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError("Stored cart must be a list of item objects")
        return cls(items=[CartItem.from_dict(record) for record in records])
