# tests/test_catalog_source.py

"""Tests for the makeup API Catalog Source using mocked HTTP responses."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from src.services.catalog_source import (
    CatalogFetchError,
    MakeupApiCatalogSource,
)

SESSION_PATH = "src.services.catalog_source.curl_requests.Session"

CATALOG_PAYLOAD: list[Any] = [
    {
        "id": 1,
        "brand": "nyx",
        "name": "Butter Gloss",
        "price": "5.0",
        "product_type": "lip_gloss",
        "product_colors": [{"hex_value": "#F4C7C3", "colour_name": "Creme"}],
    },
    {
        "id": 2,
        "brand": None,
        "name": "Mineral Blush",
        "price": "12.0",
        "product_type": "blush",
        "product_colors": [],
    },
    {"name": "no id here"},
    "garbage",
]


def _mock_response(status: int = 200, body: Any = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = body if isinstance(body, str) else json.dumps(body)
    return resp


class TestMakeupApiCatalogSource(unittest.IsolatedAsyncioTestCase):
    """MakeupApiCatalogSource.get_products behaviour."""

    @patch(SESSION_PATH)
    async def test_parses_products(self, mock_session_cls: MagicMock) -> None:
        """Valid records become Products; malformed ones are skipped."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            body=CATALOG_PAYLOAD
        )
        source = MakeupApiCatalogSource()
        products = await source.get_products()
        self.assertEqual([p.id for p in products], [1, 2])
        self.assertEqual(products[0].product_colors[0].colour_name, "Creme")
        self.assertIsNone(products[1].brand)

    @patch(SESSION_PATH)
    async def test_requests_products_endpoint(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The GET targets base URL + products endpoint."""
        session = mock_session_cls.return_value
        session.get.return_value = _mock_response(body=[])
        source = MakeupApiCatalogSource(base_url="https://api.test/")
        await source.get_products()
        url = session.get.call_args[0][0]
        self.assertEqual(url, "https://api.test/api/v1/products.json")
        self.assertIn("timeout", session.get.call_args.kwargs)

    @patch(SESSION_PATH)
    async def test_http_error_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Non-200 responses raise CatalogFetchError."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            status=503, body="Service Unavailable"
        )
        with self.assertRaisesRegex(CatalogFetchError, "HTTP 503"):
            await MakeupApiCatalogSource().get_products()

    @patch(SESSION_PATH)
    async def test_transport_error_wrapped(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Exceptions from the session are wrapped with their cause."""
        mock_session_cls.return_value.get.side_effect = ConnectionError(
            "reset"
        )
        with self.assertRaises(CatalogFetchError) as ctx:
            await MakeupApiCatalogSource().get_products()
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    @patch(SESSION_PATH)
    async def test_invalid_json_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Undecodable bodies raise CatalogFetchError."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            body="<html>oops</html>"
        )
        with self.assertRaisesRegex(CatalogFetchError, "Invalid JSON"):
            await MakeupApiCatalogSource().get_products()

    @patch(SESSION_PATH)
    async def test_non_list_payload_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A JSON object instead of an array is rejected."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            body={"error": "rate limited"}
        )
        with self.assertRaisesRegex(CatalogFetchError, "JSON array"):
            await MakeupApiCatalogSource().get_products()

    @patch(SESSION_PATH)
    async def test_non_integer_ids_skipped(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Float, overflowing and fractional ids skip only their record."""
        mock_session_cls.return_value.get.return_value = _mock_response(
            body='[{"id": 1}, {"id": 1e400}, {"id": 1.9}, {"id": "7"}]'
        )
        products = await MakeupApiCatalogSource().get_products()
        self.assertEqual([p.id for p in products], [1, 7])


if __name__ == "__main__":
    unittest.main()
