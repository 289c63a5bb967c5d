# main.py

"""Entry point for the beauty_shop application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("beauty_shop.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="beauty_shop",
        description="Browse, filter and like makeup catalog products.",
        epilog=f"Catalog: {Settings.CATALOG_BASE_URL}",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_products",
        help="Print the catalog headlessly instead of launching the TUI.",
    )
    parser.add_argument(
        "-b",
        "--brand",
        default=None,
        help="Comma-separated brands to keep (implies --list).",
    )
    parser.add_argument(
        "-t",
        "--type",
        default=None,
        dest="product_type",
        help="Comma-separated product types to keep (implies --list).",
    )
    parser.add_argument(
        "--liked",
        action="store_true",
        default=False,
        help="Only show liked products (implies --list).",
    )
    parser.add_argument(
        "--featured",
        action="store_true",
        default=False,
        help="Show the featured foundation, blush and lipstick.",
    )
    parser.add_argument(
        "--toggle-like",
        type=int,
        default=None,
        metavar="ID",
        dest="toggle_like",
        help="Like the product id, or unlike it if already liked.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import BeautyShopApp

    try:
        app = BeautyShopApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("beauty_shop TUI shutting down")


def _run_list(args: argparse.Namespace) -> None:
    """Run a headless catalog listing and exit."""
    from src.cli.runner import cli_list

    exit_code = asyncio.run(
        cli_list(
            brand_csv=args.brand,
            type_csv=args.product_type,
            output_format=args.output_format,
            liked_only=args.liked,
            featured=args.featured,
        )
    )
    sys.exit(exit_code)


def _run_toggle_like(product_id: int) -> None:
    """Flip one product's liked state and exit."""
    from src.cli.runner import cli_toggle_like

    exit_code = asyncio.run(cli_toggle_like(product_id))
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (no args) or a headless command."""
    log_file = setup_logging()
    logger.info("beauty_shop starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    headless = (
        args.list_products
        or args.brand is not None
        or args.product_type is not None
        or args.liked
        or args.featured
    )

    if args.toggle_like is not None:
        _run_toggle_like(args.toggle_like)
    elif headless:
        _run_list(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
