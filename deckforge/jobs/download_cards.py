"""
Download the Scryfall card catalog.

Usage:
    python -m deckforge.jobs.download_cards
    python -m deckforge.jobs.download_cards --output data/cards.json

The converter reads the installed file as its card catalog. A failed
download keeps whatever catalog was installed before.
"""

import argparse
import asyncio
import logging
from pathlib import Path

from deckforge.config import settings
from deckforge.services.card_catalog import download_card_database

logger = logging.getLogger(__name__)


async def run_download(output_path: Path | None = None) -> Path:
    """Download and install the catalog, returning where it was written."""
    target = output_path or settings.catalog_path
    logger.info("Downloading Scryfall card catalog to %s", target)

    try:
        return await download_card_database(target)
    except Exception as e:
        logger.error("Catalog download failed, keeping existing catalog: %s", e)
        raise


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Download the Scryfall card catalog")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Where to install the catalog (default: {settings.catalog_path})",
    )
    args = parser.parse_args(argv)

    asyncio.run(run_download(args.output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
