"""
deckforge services.

Catalog lookup, resolution, assembly and serialization of decks.
"""

from deckforge.services.card_catalog import (
    CardCatalog,
    IndexedCatalog,
    build_catalog,
    get_catalog,
    load_catalog,
)
from deckforge.services.catalog_resolver import CatalogResolver, NameMatch, ResolutionResult
from deckforge.services.deck_assembler import DeckAssembler, assemble_deck
from deckforge.services.deck_converter import (
    ConversionResult,
    DeckConverter,
    convert_deck,
    derive_deck_name,
    normalize_text,
)
from deckforge.services.deck_serializer import format_entry_line, serialize_deck, write_deck

__all__ = [
    "CardCatalog",
    "CatalogResolver",
    "ConversionResult",
    "DeckAssembler",
    "DeckConverter",
    "IndexedCatalog",
    "NameMatch",
    "ResolutionResult",
    "assemble_deck",
    "build_catalog",
    "convert_deck",
    "derive_deck_name",
    "format_entry_line",
    "get_catalog",
    "load_catalog",
    "normalize_text",
    "serialize_deck",
    "write_deck",
]
