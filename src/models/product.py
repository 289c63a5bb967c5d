# src/models/product.py

"""Catalog product and shade models."""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from src.config.settings import Settings

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def parse_hex_color(hex_value: str | None) -> tuple[int, int, int]:
    """Convert a catalog hex string like ``#B28378`` to an RGB triple.

    The catalog sometimes packs several hexes into one field
    (``"#c6a38a,#d0a58d"``); only the first is used.  Anything
    unparseable maps to ``Settings.FALLBACK_SHADE_RGB``.
    """
    if not hex_value:
        return Settings.FALLBACK_SHADE_RGB
    first = hex_value.split(",")[0].strip()
    match = _HEX_RE.match(first)
    if not match:
        return Settings.FALLBACK_SHADE_RGB
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


@dataclass(frozen=True)
class ProductColor:
    """A shade variant of a product, compared by value."""

    hex_value: str
    colour_name: str | None = None

    @property
    def rgb(self) -> tuple[int, int, int]:
        return parse_hex_color(self.hex_value)

    @property
    def label(self) -> str:
        return self.colour_name or "Custom"


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_id(raw_id: Any) -> int:
    """Integer ids or all-digit strings; floats and bools are rejected."""
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        return raw_id
    if isinstance(raw_id, str) and raw_id.strip().isdecimal():
        return int(raw_id.strip())
    raise ValueError(f"Catalog record without an integer id: {raw_id!r}")


@dataclass(frozen=True)
class Product:
    """A single catalog product as returned by the makeup API."""

    id: int
    name: str | None = None
    brand: str | None = None
    product_type: str | None = None
    price: str | None = None
    price_sign: str | None = None
    image_link: str = ""
    description: str | None = None
    rating: float | None = None
    product_colors: tuple[ProductColor, ...] = field(
        default_factory=tuple
    )

    @property
    def price_value(self) -> Decimal | None:
        """Price as a ``Decimal``, or ``None`` if missing or malformed."""
        if self.price is None:
            return None
        try:
            return Decimal(self.price)
        except InvalidOperation:
            return None

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "Product":
        """Build a Product from one JSON object of the catalog API.

        Raises ``ValueError`` when the record has no usable ``id``.
        """
        product_id = _parse_id(record.get("id"))

        colors: list[ProductColor] = []
        for entry in record.get("product_colors") or []:
            if not isinstance(entry, dict):
                continue
            hex_value = _optional_str(entry.get("hex_value"))
            if hex_value is None:
                continue
            colors.append(
                ProductColor(
                    hex_value=hex_value,
                    colour_name=_optional_str(entry.get("colour_name")),
                )
            )

        raw_rating = record.get("rating")
        rating = (
            float(raw_rating)
            if isinstance(raw_rating, (int, float))
            and not isinstance(raw_rating, bool)
            else None
        )

        return cls(
            id=product_id,
            name=_optional_str(record.get("name")),
            brand=_optional_str(record.get("brand")),
            product_type=_optional_str(
                record.get("product_type") or record.get("productType")
            ),
            price=_optional_str(record.get("price")),
            price_sign=_optional_str(record.get("price_sign")),
            image_link=str(record.get("image_link") or ""),
            description=_optional_str(record.get("description")),
            rating=rating,
            product_colors=tuple(colors),
        )
