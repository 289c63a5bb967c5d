# src/filters/product_filter.py

"""Brand / product-type filtering and derived catalog views."""

import logging
from collections.abc import Iterable, Sequence

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("beauty_shop.filters")


class ProductFilter:
    """Pure helpers that derive views from a product list."""

    @staticmethod
    def matches(
        product: Product,
        brands: frozenset[str],
        product_types: frozenset[str],
    ) -> bool:
        """Check one product against both filter axes.

        An empty selection means no restriction on that axis.  A product
        with no brand (or type) never matches a non-empty selection.
        """
        brand_match = not brands or product.brand in brands
        type_match = (
            not product_types or product.product_type in product_types
        )
        return brand_match and type_match

    @staticmethod
    def filter_by_selection(
        products: Sequence[Product],
        brands: frozenset[str],
        product_types: frozenset[str],
    ) -> tuple[Product, ...]:
        """Return the products matching the brand and type selections."""
        kept = tuple(
            p
            for p in products
            if ProductFilter.matches(p, brands, product_types)
        )
        logger.debug(
            "Filter kept %d of %d products (brands=%s, types=%s)",
            len(kept),
            len(products),
            sorted(brands),
            sorted(product_types),
        )
        return kept

    @staticmethod
    def distinct_sorted(values: Iterable[str | None]) -> tuple[str, ...]:
        """Sorted, duplicate-free, ``None``-free projection."""
        return tuple(sorted({v for v in values if v is not None}))

    @staticmethod
    def available_brands(products: Sequence[Product]) -> tuple[str, ...]:
        return ProductFilter.distinct_sorted(p.brand for p in products)

    @staticmethod
    def available_product_types(
        products: Sequence[Product],
    ) -> tuple[str, ...]:
        return ProductFilter.distinct_sorted(
            p.product_type for p in products
        )

    @staticmethod
    def featured(
        products: Sequence[Product],
        product_types: Sequence[str] = Settings.FEATURED_PRODUCT_TYPES,
    ) -> list[Product]:
        """First product of each featured type, in the fixed type order.

        Types with no product in the catalog are skipped.
        """
        picks: list[Product] = []
        for product_type in product_types:
            first = next(
                (p for p in products if p.product_type == product_type),
                None,
            )
            if first is not None:
                picks.append(first)
        return picks
