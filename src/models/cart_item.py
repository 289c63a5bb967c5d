# src/models/cart_item.py

"""Cart line item model."""

from dataclasses import dataclass

from src.models.product import ProductColor

CartKey = tuple[int, ProductColor | None]


@dataclass(frozen=True)
class CartItem:
    """One cart line: a product in an optional shade, with a quantity.

    Two shades of the same product are separate lines.
    """

    product_id: int
    selected_shade: ProductColor | None = None
    quantity: int = 1

    @property
    def key(self) -> CartKey:
        return (self.product_id, self.selected_shade)
