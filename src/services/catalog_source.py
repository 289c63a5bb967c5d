# src/services/catalog_source.py

"""Catalog Source: fetches the product list from the makeup REST API."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("beauty_shop.catalog")


class CatalogFetchError(Exception):
    """The catalog could not be fetched or decoded."""


class CatalogSource(ABC):
    """Asynchronous provider of the full product list."""

    @abstractmethod
    async def get_products(self) -> list[Product]:
        """Return every catalog product.

        Raises ``CatalogFetchError`` on any failure.
        """
        ...


class MakeupApiCatalogSource(CatalogSource):
    """Catalog Source backed by the public makeup API.

    The endpoint returns the whole catalog as one JSON array, so a
    single GET per fetch is enough; no pagination.
    """

    def __init__(self, base_url: str | None = None) -> None:
        self.settings = Settings()
        self.base_url = base_url or self.settings.CATALOG_BASE_URL
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    @property
    def products_url(self) -> str:
        return (
            self.base_url.rstrip("/")
            + "/"
            + self.settings.PRODUCTS_ENDPOINT.lstrip("/")
        )

    async def get_products(self) -> list[Product]:
        return await asyncio.to_thread(self._fetch_products)

    def _fetch_products(self) -> list[Product]:
        """Blocking GET + decode, run off the event loop."""
        url = self.products_url
        try:
            resp = self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise CatalogFetchError(
                f"Request to {url} failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise CatalogFetchError(
                f"HTTP {resp.status_code} from {url}"
            )

        try:
            data: Any = json.loads(resp.text)
        except json.JSONDecodeError as exc:
            raise CatalogFetchError(
                f"Invalid JSON from {url}: {exc}"
            ) from exc

        if not isinstance(data, list):
            raise CatalogFetchError(
                f"Expected a JSON array from {url}, "
                f"got {type(data).__name__}"
            )

        products = self._parse_records(data)
        logger.info(
            "Fetched %d products from %s", len(products), url
        )
        return products

    @staticmethod
    def _parse_records(records: list[Any]) -> list[Product]:
        """Parse API records, skipping the ones without a valid id."""
        products: list[Product] = []
        skipped = 0
        for record in records:
            if not isinstance(record, dict):
                skipped += 1
                continue
            try:
                products.append(Product.from_api(record))
            except (TypeError, ValueError, OverflowError) as exc:
                logger.debug("Skipping catalog record: %s", exc)
                skipped += 1
        if skipped:
            logger.info(
                "Skipped %d malformed catalog records", skipped
            )
        return products
