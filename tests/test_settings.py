# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_catalog_url_is_http(self) -> None:
        """CATALOG_BASE_URL must be an http(s) URL."""
        self.assertRegex(Settings.CATALOG_BASE_URL, r"^https?://")

    def test_products_endpoint_is_json(self) -> None:
        """The products endpoint returns JSON."""
        self.assertTrue(Settings.PRODUCTS_ENDPOINT.endswith(".json"))

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_featured_types_fixed_order(self) -> None:
        """Featured categories are foundation, blush, lipstick."""
        self.assertEqual(
            Settings.FEATURED_PRODUCT_TYPES,
            ("foundation", "blush", "lipstick"),
        )

    def test_fallback_shade_is_rgb(self) -> None:
        """The fallback shade is a valid RGB triple."""
        self.assertEqual(len(Settings.FALLBACK_SHADE_RGB), 3)
        for channel in Settings.FALLBACK_SHADE_RGB:
            self.assertTrue(0 <= channel <= 255)

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.LIKES_DB_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)

    def test_default_headers_accept_json(self) -> None:
        """DEFAULT_HEADERS asks for JSON."""
        self.assertEqual(
            Settings.DEFAULT_HEADERS["Accept"], "application/json"
        )


if __name__ == "__main__":
    unittest.main()
