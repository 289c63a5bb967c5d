# src/cli/runner.py

"""Headless CLI: list, filter and like catalog products."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.models.product import Product
from src.services.catalog_source import CatalogSource, MakeupApiCatalogSource
from src.services.catalog_store import CatalogStore
from src.storage.liked_products_db import LikedProductsDB, PreferenceStore

logger = logging.getLogger("beauty_shop.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated CLI value, dropping blanks."""
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def shade_swatches(product: Product, limit: int = 8) -> Text:
    """Coloured dots for a product's shades, ``+N`` past *limit*."""
    text = Text()
    for shade in product.product_colors[:limit]:
        r, g, b = shade.rgb
        text.append("●", style=f"rgb({r},{g},{b})")
    extra = len(product.product_colors) - limit
    if extra > 0:
        text.append(f" +{extra}", style="dim")
    return text


def format_price(product: Product) -> str:
    if product.price_value is None:
        return "N/A"
    return f"{product.price_sign or '$'}{product.price_value:.2f}"


def _products_to_dicts(
    products: list[Product], liked: frozenset[int],
) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "id": p.id,
            "name": p.name,
            "brand": p.brand,
            "product_type": p.product_type,
            "price": p.price,
            "price_sign": p.price_sign,
            "rating": p.rating,
            "image_link": p.image_link,
            "liked": p.id in liked,
            "shades": [
                {"name": c.colour_name, "hex": c.hex_value}
                for c in p.product_colors
            ],
        }
        for p in products
    ]


def _print_table(
    products: list[Product], liked: frozenset[int], title: str,
) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold magenta",
    )
    table.add_column("♥", width=2, style="red")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", max_width=50)
    table.add_column("Brand", style="cyan")
    table.add_column("Type")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Shades")

    for p in products:
        table.add_row(
            "♥" if p.id in liked else "",
            str(p.id),
            Text((p.name or "")[:50]),
            Text(p.brand or "—"),
            Text(p.product_type or "—"),
            format_price(p),
            shade_swatches(p),
        )

    Console().print(table)


def _warn_unknown(
    requested: list[str], available: tuple[str, ...], axis: str,
) -> None:
    unknown = [r for r in requested if r not in available]
    if unknown:
        _err.print(
            f"[yellow]Unknown {axis}(s): {', '.join(unknown)}[/yellow]"
        )
        _err.print(f"[dim]Available: {', '.join(available)}[/dim]")


async def _await_ready(store: CatalogStore) -> bool:
    """Wait for the liked ids; report a broken Preference Store."""
    try:
        await store.ready()
    except Exception as exc:
        _err.print(f"[red]Could not read liked products: {exc}[/red]")
        return False
    return True


async def cli_list(
    brand_csv: str | None,
    type_csv: str | None,
    output_format: str,
    liked_only: bool = False,
    featured: bool = False,
    catalog_source: CatalogSource | None = None,
    preference_store: PreferenceStore | None = None,
) -> int:
    """Fetch the catalog, apply filters and print it.

    Returns an exit code (0=ok, 1=nothing to show).
    """
    owned_db: LikedProductsDB | None = None
    if preference_store is None:
        owned_db = LikedProductsDB()
        preference_store = owned_db
    store = CatalogStore(
        catalog_source or MakeupApiCatalogSource(), preference_store
    )
    store.start()
    try:
        if not await _await_ready(store):
            return 1
        _err.print("[bold]Fetching catalog...[/bold]")
        await store.fetch_products()
        state = store.state
        if not state.products:
            _err.print("[red]No products fetched (see log).[/red]")
            return 1

        brands = split_csv(brand_csv)
        product_types = split_csv(type_csv)
        _warn_unknown(brands, state.available_brands, "brand")
        _warn_unknown(
            product_types, state.available_product_types, "type"
        )
        for brand in brands:
            store.toggle_brand_filter(brand)
        for product_type in product_types:
            store.toggle_product_type_filter(product_type)

        if featured:
            products = store.get_featured_products()
            title = "Featured"
        else:
            products = store.get_display_products()
            title = "Products"
        liked = store.state.liked_products
        if liked_only:
            products = [p for p in products if p.id in liked]
            title = f"Liked {title}"

        _err.print(
            f"[green]✓ {len(products)} of {len(state.products)}"
            f" products[/green]"
        )
        if not products:
            _err.print("[yellow]No products match.[/yellow]")
            return 1

        if output_format == "table":
            _print_table(products, liked, title)
        else:
            json.dump(
                _products_to_dicts(products, liked),
                sys.stdout,
                ensure_ascii=False,
                indent=2,
            )
            sys.stdout.write("\n")
        return 0
    finally:
        await store.close()
        if owned_db is not None:
            owned_db.close()


async def cli_toggle_like(
    product_id: int,
    preference_store: PreferenceStore | None = None,
) -> int:
    """Flip the liked state of one product id."""
    owned_db: LikedProductsDB | None = None
    if preference_store is None:
        owned_db = LikedProductsDB()
        preference_store = owned_db
    # Likes do not need the catalog; the source is never fetched.
    store = CatalogStore(MakeupApiCatalogSource(), preference_store)
    store.start()
    try:
        if not await _await_ready(store):
            return 1
        was_liked = store.is_liked(product_id)
        try:
            await store.toggle_like(product_id)
        except Exception as exc:
            _err.print(f"[red]Could not update like: {exc}[/red]")
            return 1
        verb = "Unliked" if was_liked else "Liked"
        logger.info("%s product %d from the CLI", verb, product_id)
        _err.print(f"[green]✓ {verb} product {product_id}[/green]")
        return 0
    finally:
        await store.close()
        if owned_db is not None:
            owned_db.close()
