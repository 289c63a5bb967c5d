# src/services/catalog_store.py

"""Catalog state reducer: the single owner of the session's AppState."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

from src.filters.product_filter import ProductFilter
from src.models.app_state import AppState
from src.models.cart_item import CartItem
from src.models.product import Product, ProductColor
from src.services.catalog_source import CatalogSource
from src.storage.liked_products_db import PreferenceStore

logger = logging.getLogger("beauty_shop.store")

StateListener = Callable[[AppState], None]


class CatalogStore:
    """Holds products, filters, cart and liked ids for one session.

    Every command builds the next ``AppState`` from the current one and
    swaps it in with a single assignment on the event-loop thread, so
    subscribers only ever see complete states.

    Liked ids are read-through: ``toggle_like`` writes to the
    Preference Store and the store's change stream is the only thing
    that updates ``liked_products``.
    """

    def __init__(
        self,
        catalog_source: CatalogSource,
        preference_store: PreferenceStore,
    ) -> None:
        self._catalog = catalog_source
        self._preferences = preference_store
        self._state = AppState()
        self._listeners: list[StateListener] = []
        self._fetch_task: asyncio.Task[None] | None = None
        self._likes_task: asyncio.Task[None] | None = None
        self._like_writes: set[asyncio.Task[None]] = set()
        self._likes_synced = asyncio.Event()
        self._likes_error: Exception | None = None

    @property
    def state(self) -> AppState:
        return self._state

    # ── Subscription / lifecycle ─────────────────────────

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with every new state.  Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Begin mirroring the Preference Store's liked ids."""
        if self._likes_task is None:
            self._likes_task = asyncio.create_task(
                self._collect_liked_ids()
            )

    async def ready(self) -> None:
        """Wait until the first liked-id set has been mirrored.

        Re-raises the error that stopped the liked-id stream, if any.
        """
        await self._likes_synced.wait()
        if self._likes_error is not None:
            raise self._likes_error

    async def close(self) -> None:
        """Cancel background tasks owned by this store."""
        self._listeners.clear()
        tasks = [
            t
            for t in (self._likes_task, self._fetch_task, *self._like_writes)
            if t is not None and not t.done()
        ]
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._likes_task = None

    def _apply(
        self, transform: Callable[[AppState], AppState],
    ) -> AppState:
        new_state = transform(self._state)
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.error(
                    "State listener %r failed", listener, exc_info=True
                )
        return new_state

    async def _collect_liked_ids(self) -> None:
        try:
            async for liked_ids in self._preferences.watch_liked_ids():
                self._apply(
                    lambda s: replace(
                        s, liked_products=frozenset(liked_ids)
                    )
                )
                self._likes_synced.set()
        except Exception as exc:
            logger.error("Liked-id stream failed", exc_info=True)
            self._likes_error = exc
        finally:
            self._likes_synced.set()

    # ── Catalog fetch ────────────────────────────────────

    def fetch_products(self) -> asyncio.Task[None]:
        """Start a catalog fetch, or join the one already in flight."""
        if self._fetch_task is not None and not self._fetch_task.done():
            logger.debug("Fetch already in flight, joining it")
            return self._fetch_task
        self._fetch_task = asyncio.create_task(self._fetch())
        return self._fetch_task

    async def _fetch(self) -> None:
        self._apply(lambda s: replace(s, loading=True))
        try:
            fetched = await self._catalog.get_products()
        except asyncio.CancelledError:
            self._apply(lambda s: replace(s, loading=False))
            raise
        except Exception:
            logger.error("Failed to fetch products", exc_info=True)
            self._apply(lambda s: replace(s, loading=False))
            return

        products = tuple(fetched)
        self._apply(
            lambda s: replace(
                s,
                products=products,
                filtered_products=products,
                loading=False,
                available_brands=ProductFilter.available_brands(products),
                available_product_types=(
                    ProductFilter.available_product_types(products)
                ),
            )
        )
        logger.info("Catalog loaded with %d products", len(products))

    # ── Filters ──────────────────────────────────────────

    @staticmethod
    def _refiltered(state: AppState) -> AppState:
        return replace(
            state,
            filtered_products=ProductFilter.filter_by_selection(
                state.products,
                state.selected_brands,
                state.selected_product_types,
            ),
        )

    def toggle_brand_filter(self, brand: str) -> None:
        self._apply(
            lambda s: self._refiltered(
                replace(s, selected_brands=s.selected_brands ^ {brand})
            )
        )

    def toggle_product_type_filter(self, product_type: str) -> None:
        self._apply(
            lambda s: self._refiltered(
                replace(
                    s,
                    selected_product_types=(
                        s.selected_product_types ^ {product_type}
                    ),
                )
            )
        )

    def clear_filters(self) -> None:
        self._apply(
            lambda s: replace(
                s,
                selected_brands=frozenset(),
                selected_product_types=frozenset(),
                filtered_products=s.products,
            )
        )

    # ── Likes ────────────────────────────────────────────

    def toggle_like(self, product_id: int) -> asyncio.Task[None]:
        """Like or unlike *product_id* through the Preference Store.

        Local state is untouched until the store emits.  A failed write
        is logged and not retried; callers awaiting the task see it.
        """
        if product_id in self._state.liked_products:
            write = self._preferences.unlike_product(product_id)
        else:
            write = self._preferences.like_product(product_id)
        task = asyncio.create_task(write)
        self._like_writes.add(task)
        task.add_done_callback(self._on_like_written)
        return task

    def _on_like_written(self, task: asyncio.Task[None]) -> None:
        self._like_writes.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Like/unlike write failed", exc_info=exc,
            )

    def is_liked(self, product_id: int) -> bool:
        return product_id in self._state.liked_products

    # ── Cart ─────────────────────────────────────────────

    def add_to_cart(
        self, product_id: int, shade: ProductColor | None = None,
    ) -> None:
        key = (product_id, shade)

        def transform(s: AppState) -> AppState:
            items = list(s.cart_items)
            for idx, item in enumerate(items):
                if item.key == key:
                    items[idx] = replace(item, quantity=item.quantity + 1)
                    break
            else:
                items.append(CartItem(product_id, shade, 1))
            return replace(s, cart_items=tuple(items))

        self._apply(transform)

    def remove_from_cart(
        self, product_id: int, shade: ProductColor | None = None,
    ) -> None:
        key = (product_id, shade)
        if not any(i.key == key for i in self._state.cart_items):
            return

        def transform(s: AppState) -> AppState:
            items: list[CartItem] = []
            for item in s.cart_items:
                if item.key != key:
                    items.append(item)
                elif item.quantity > 1:
                    items.append(replace(item, quantity=item.quantity - 1))
            return replace(s, cart_items=tuple(items))

        self._apply(transform)

    # ── Queries ──────────────────────────────────────────

    def get_cart_count(self) -> int:
        return sum(item.quantity for item in self._state.cart_items)

    def get_cart_lines(self) -> list[tuple[Product, CartItem]]:
        """Cart lines joined to their products, in cart order.

        Lines whose product is not in the current catalog are skipped.
        """
        by_id = {p.id: p for p in self._state.products}
        return [
            (by_id[item.product_id], item)
            for item in self._state.cart_items
            if item.product_id in by_id
        ]

    def get_cart_total(self) -> str:
        """Cart total formatted with two decimals, e.g. ``"24.50"``.

        Missing or malformed prices count as zero.
        """
        by_id = {p.id: p for p in self._state.products}
        total = Decimal(0)
        for item in self._state.cart_items:
            product = by_id.get(item.product_id)
            price = product.price_value if product else None
            if price is not None and price.is_finite():
                total += price * item.quantity
        return f"{total:.2f}"

    def get_display_products(self) -> list[Product]:
        return list(self._state.filtered_products)

    def has_active_filters(self) -> bool:
        return bool(
            self._state.selected_brands
            or self._state.selected_product_types
        )

    def get_featured_products(self) -> list[Product]:
        return ProductFilter.featured(self._state.products)

    def get_liked_products(self) -> list[Product]:
        """Liked products from the full catalog, in catalog order."""
        liked = self._state.liked_products
        return [p for p in self._state.products if p.id in liked]
