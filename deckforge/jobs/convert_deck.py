"""
Convert a deck file to the canonical .dck format.

Usage:
    python -m deckforge.jobs.convert_deck my_deck.txt my_deck.dck
    python -m deckforge.jobs.convert_deck deck.txt out.dck --cutoff 2020-01-01

Exit code is 0 on success (possibly with warnings) and 1 when the input
is missing or empty, the catalog can't be loaded, or no card resolved.
"""

import argparse
import logging
from datetime import date
from pathlib import Path

from deckforge.config import settings
from deckforge.models.failure import CatalogUnavailableError, EmptyDeckError
from deckforge.models.options import ConversionOptions
from deckforge.services.card_catalog import CardCatalog, get_catalog, load_catalog
from deckforge.services.deck_converter import DeckConverter, derive_deck_name
from deckforge.services.deck_serializer import write_deck

logger = logging.getLogger(__name__)


def run_conversion(
    input_path: Path,
    output_path: Path,
    catalog: CardCatalog,
    options: ConversionOptions | None = None,
    name: str | None = None,
) -> bool:
    """
    Read, convert and write one deck.

    Returns:
        True if the deck was written, False otherwise
    """
    if not input_path.exists():
        logger.error("Input file does not exist: %s", input_path.resolve())
        return False

    logger.info("Reading deck from: %s", input_path.resolve())
    content = input_path.read_text(encoding="utf-8", errors="replace")
    if not content.strip():
        logger.error("Input file is empty: %s", input_path)
        return False

    converter = DeckConverter(catalog, options)
    try:
        result = converter.convert(content, default_name=name or derive_deck_name(input_path))
    except EmptyDeckError as e:
        logger.error("Could not create deck: %s", e.to_detail().model_dump_json(exclude_none=True))
        return False

    for diagnostic in result.diagnostics:
        logger.warning("%s", diagnostic)

    write_deck(result.deck, output_path)
    logger.info("Wrote deck %r to %s", result.deck.name, output_path.resolve())
    return True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a deck list into the canonical .dck format"
    )
    parser.add_argument("input_file", type=Path, help="Deck file to convert")
    parser.add_argument("output_file", type=Path, help="Where to write the .dck file")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help=f"Scryfall bulk JSON (default: {settings.catalog_path})",
    )
    parser.add_argument("--name", default=None, help="Deck name if the file names none")
    parser.add_argument(
        "--cutoff",
        type=date.fromisoformat,
        default=None,
        help="Only use printings released on or before this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--no-prefix",
        action="store_true",
        help="Disable unique-prefix name matching",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)

    try:
        catalog = load_catalog(args.catalog) if args.catalog else get_catalog()
    except (FileNotFoundError, ValueError) as e:
        error = CatalogUnavailableError(str(e))
        logger.error(
            "Failed to load card catalog: %s", error.to_detail().model_dump_json(exclude_none=True)
        )
        return 1

    options = ConversionOptions(
        allow_prefix_match=settings.allow_prefix_match and not args.no_prefix,
        printing_cutoff=args.cutoff,
    )
    ok = run_conversion(args.input_file, args.output_file, catalog, options, args.name)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
