# src/models/app_state.py

"""Immutable snapshot of the shopping session state."""

from dataclasses import dataclass, field

from src.models.cart_item import CartItem
from src.models.product import Product


@dataclass(frozen=True)
class AppState:
    """Everything the presentation layer renders from.

    Instances are never mutated; ``CatalogStore`` swaps in a new one
    for every transition.
    """

    products: tuple[Product, ...] = field(default_factory=tuple)
    filtered_products: tuple[Product, ...] = field(default_factory=tuple)
    liked_products: frozenset[int] = field(default_factory=frozenset)
    cart_items: tuple[CartItem, ...] = field(default_factory=tuple)
    loading: bool = False
    selected_brands: frozenset[str] = field(default_factory=frozenset)
    selected_product_types: frozenset[str] = field(
        default_factory=frozenset
    )
    available_brands: tuple[str, ...] = field(default_factory=tuple)
    available_product_types: tuple[str, ...] = field(
        default_factory=tuple
    )
