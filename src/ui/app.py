# src/ui/app.py

"""Terminal UI for browsing, filtering, liking and carting products."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from src.cli.runner import format_price, shade_swatches
from src.models.app_state import AppState
from src.models.cart_item import CartItem
from src.models.product import Product, ProductColor
from src.services.catalog_source import MakeupApiCatalogSource
from src.services.catalog_store import CatalogStore
from src.storage.liked_products_db import LikedProductsDB

logger = logging.getLogger("beauty_shop.ui")


def _filter_options(
    values: tuple[str, ...], selected: frozenset[str],
) -> list[Option]:
    return [
        Option(Text(f"{'✓' if v in selected else ' '} {v}"), id=v)
        for v in values
    ]


def _shade_text(shade: ProductColor | None) -> Text:
    """Swatch dot plus shade name; a dash when no shade was picked."""
    if shade is None:
        return Text("—", style="dim")
    r, g, b = shade.rgb
    text = Text("● ", style=f"rgb({r},{g},{b})")
    text.append(shade.label)
    return text


def _line_total(product: Product, item: CartItem) -> Text:
    price = product.price_value
    if price is None or not price.is_finite():
        return Text("N/A", style="dim")
    return Text(
        f"{product.price_sign or '$'}{price * item.quantity:.2f}",
        style="green",
    )


class BeautyShopApp(App[object]):
    """Terminal front end rendering ``AppState`` from a CatalogStore."""

    CSS = """
    #title { text-style: bold; padding: 0 1; }
    #filters { height: 12; }
    #filters OptionList { width: 1fr; }
    #status { padding: 0 1; color: $text-muted; }
    #body { height: 1fr; }
    #products_table { width: 2fr; }
    #cart_table { width: 1fr; border: round $accent; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("l", "toggle_like", "Like"),
        Binding("a", "add_to_cart", "Add to cart"),
        Binding("x", "remove_from_cart", "Remove"),
        Binding("plus", "cart_increment", "Cart +1"),
        Binding("minus", "cart_decrement", "Cart -1"),
        Binding("v", "show_liked", "Liked"),
        Binding("f", "show_featured", "Featured"),
        Binding("c", "clear_filters", "Clear filters"),
        Binding("r", "refresh", "Refetch"),
    ]

    def __init__(self, store: CatalogStore | None = None) -> None:
        super().__init__()
        self._owned_db: LikedProductsDB | None = None
        if store is None:
            self._owned_db = LikedProductsDB()
            store = CatalogStore(MakeupApiCatalogSource(), self._owned_db)
        self.store = store
        self.rows: list[Product] = []
        self.cart_lines: list[tuple[Product, CartItem]] = []
        self.view = "products"
        self._filters_key: tuple[object, ...] | None = None
        self._shades_key: tuple[object, ...] | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("💄 Beauty Shop", id="title"),
            Horizontal(
                OptionList(id="brand_filters"),
                OptionList(id="type_filters"),
                OptionList(id="shade_picker"),
                id="filters",
            ),
            Static("Ready", id="status"),
            Horizontal(
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="products_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                cast(
                    DataTable[str | Text],
                    DataTable(id="cart_table", cursor_type="row"),
                ),
                id="body",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Wire the store and kick off the first fetch."""
        self._table("#products_table").add_columns(
            "♥", "Name", "Brand", "Type", "Price", "Shades"
        )
        self._table("#cart_table").add_columns(
            "Product", "Shade", "Qty", "Total"
        )
        for widget_id, title in (
            ("#brand_filters", "Brands"),
            ("#type_filters", "Types"),
            ("#shade_picker", "Shades"),
        ):
            self.query_one(widget_id, OptionList).border_title = title
        self.store.subscribe(self.render_state)
        self.store.start()
        self.store.fetch_products()
        self.render_state(self.store.state)

    async def on_unmount(self) -> None:
        await self.store.close()
        if self._owned_db is not None:
            self._owned_db.close()

    def _table(self, selector: str) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one(selector, DataTable),
        )

    # ── Rendering ────────────────────────────────────────

    def render_state(self, state: AppState) -> None:
        """Redraw every panel from a state snapshot."""
        self._render_filters(state)
        self._render_table(state)
        self._render_shades()
        self._render_cart()
        self._render_status(state)

    def _render_filters(self, state: AppState) -> None:
        key = (
            state.available_brands,
            state.selected_brands,
            state.available_product_types,
            state.selected_product_types,
        )
        if key == self._filters_key:
            return
        self._filters_key = key
        for widget_id, values, selected in (
            ("#brand_filters", state.available_brands, state.selected_brands),
            (
                "#type_filters",
                state.available_product_types,
                state.selected_product_types,
            ),
        ):
            option_list = self.query_one(widget_id, OptionList)
            highlighted = option_list.highlighted
            option_list.clear_options()
            option_list.add_options(_filter_options(values, selected))
            if highlighted is not None and highlighted < len(values):
                option_list.highlighted = highlighted

    def _view_products(self, state: AppState) -> list[Product]:
        if self.view == "featured":
            return self.store.get_featured_products()
        if self.view == "liked":
            return self.store.get_liked_products()
        return list(state.filtered_products)

    def _render_table(self, state: AppState) -> None:
        table = self._table("#products_table")
        cursor = table.cursor_row
        table.clear()
        self.rows = self._view_products(state)
        for p in self.rows:
            table.add_row(
                Text("♥", style="red")
                if p.id in state.liked_products
                else "",
                Text((p.name or "")[:50]),
                Text(p.brand or "—"),
                Text(p.product_type or "—"),
                Text(format_price(p), style="green"),
                shade_swatches(p),
            )
        if self.rows:
            table.move_cursor(row=min(cursor, len(self.rows) - 1))

    def _render_shades(self) -> None:
        """Offer the highlighted product's shades, keeping the pick."""
        product = self._selected_product()
        key = (product.id, product.product_colors) if product else None
        if key == self._shades_key:
            return
        self._shades_key = key
        picker = self.query_one("#shade_picker", OptionList)
        picker.clear_options()
        if product is None or not product.product_colors:
            return
        picker.add_options(
            Option(_shade_text(shade)) for shade in product.product_colors
        )
        picker.highlighted = 0

    def _render_cart(self) -> None:
        cart = self._table("#cart_table")
        cursor = cart.cursor_row
        cart.clear()
        self.cart_lines = self.store.get_cart_lines()
        for product, item in self.cart_lines:
            cart.add_row(
                Text((product.name or str(product.id))[:30]),
                _shade_text(item.selected_shade),
                str(item.quantity),
                _line_total(product, item),
            )
        if self.cart_lines:
            cart.move_cursor(row=min(cursor, len(self.cart_lines) - 1))
        cart.border_title = (
            f"Cart: {self.store.get_cart_count()} items, "
            f"${self.store.get_cart_total()}"
        )

    def _render_status(self, state: AppState) -> None:
        status = self.query_one("#status", Static)
        if state.loading:
            status.update("⏳ Loading catalog...")
            return
        parts = [f"{len(self.rows)} {self.view}"]
        if self.store.has_active_filters():
            parts.append(
                f"filters: {len(state.selected_brands)} brands, "
                f"{len(state.selected_product_types)} types"
            )
        parts.append(
            f"🛒 {self.store.get_cart_count()} items "
            f"(${self.store.get_cart_total()})"
        )
        status.update(" | ".join(parts))

    def _selected_product(self) -> Product | None:
        row = self._table("#products_table").cursor_row
        if 0 <= row < len(self.rows):
            return self.rows[row]
        return None

    def _selected_shade(self, product: Product) -> ProductColor | None:
        """The picker's highlighted shade, or None for shadeless products."""
        self._render_shades()
        if not product.product_colors:
            return None
        index = self.query_one("#shade_picker", OptionList).highlighted
        if index is None or index >= len(product.product_colors):
            return product.product_colors[0]
        return product.product_colors[index]

    def _selected_cart_line(self) -> CartItem | None:
        row = self._table("#cart_table").cursor_row
        if 0 <= row < len(self.cart_lines):
            return self.cart_lines[row][1]
        return None

    # ── Events / actions ─────────────────────────────────

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted,
    ) -> None:
        if event.data_table.id == "products_table":
            self._render_shades()

    def on_option_list_option_selected(
        self, event: OptionList.OptionSelected,
    ) -> None:
        """Toggle the brand or type filter that was picked."""
        value = event.option.id
        if value is None:
            return
        self.view = "products"
        if event.option_list.id == "brand_filters":
            self.store.toggle_brand_filter(value)
        elif event.option_list.id == "type_filters":
            self.store.toggle_product_type_filter(value)

    def action_toggle_like(self) -> None:
        product = self._selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        self.store.toggle_like(product.id)

    def action_add_to_cart(self) -> None:
        product = self._selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        shade = self._selected_shade(product)
        self.store.add_to_cart(product.id, shade)
        label = product.name or str(product.id)
        if shade is not None:
            label = f"{label} ({shade.label})"
        self.notify(f"Added {label} to cart", markup=False)

    def action_remove_from_cart(self) -> None:
        product = self._selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        self.store.remove_from_cart(
            product.id, self._selected_shade(product)
        )

    def action_cart_increment(self) -> None:
        item = self._selected_cart_line()
        if item is None:
            self.notify("Cart is empty", severity="warning")
            return
        self.store.add_to_cart(item.product_id, item.selected_shade)

    def action_cart_decrement(self) -> None:
        item = self._selected_cart_line()
        if item is None:
            self.notify("Cart is empty", severity="warning")
            return
        self.store.remove_from_cart(item.product_id, item.selected_shade)

    def action_clear_filters(self) -> None:
        self.view = "products"
        self.store.clear_filters()

    def _switch_view(self, view: str) -> None:
        self.view = "products" if self.view == view else view
        self.render_state(self.store.state)

    def action_show_featured(self) -> None:
        """Switch between the featured picks and the filtered list."""
        self._switch_view("featured")

    def action_show_liked(self) -> None:
        """Switch between liked products and the filtered list."""
        self._switch_view("liked")

    def action_refresh(self) -> None:
        logger.info("Catalog refetch requested from the TUI")
        self.store.fetch_products()
