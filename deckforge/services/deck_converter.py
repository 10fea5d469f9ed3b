"""
Deck Conversion Service.

The single entry point for turning deck text into a Deck:

    raw text -> classify -> recognize -> resolve -> assemble

The catalog is passed in, never looked up globally, so independent
conversions can share one read-only catalog.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from deckforge.models.deck import Deck, Diagnostic, DiagnosticKind
from deckforge.models.options import ConversionOptions
from deckforge.parsers.deck_recognizer import recognize
from deckforge.parsers.line_classifier import LineClassifier
from deckforge.services.card_catalog import CardCatalog
from deckforge.services.catalog_resolver import CatalogResolver
from deckforge.services.deck_assembler import DeckAssembler

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


@dataclass
class ConversionResult:
    """A finalized deck plus every warning raised while building it."""

    deck: Deck
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """True if the pass produced no diagnostics."""
        return not self.diagnostics

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]


def normalize_text(raw_input: str) -> str:
    """Strip a leading BOM and normalize line endings to "\\n"."""
    if raw_input.startswith(_BOM):
        raw_input = raw_input[len(_BOM) :]
    return raw_input.replace("\r\n", "\n").replace("\r", "\n")


def derive_deck_name(path: Path) -> str:
    """Default deck name for a file: its name without the extension."""
    return path.stem


class DeckConverter:
    """
    Runs the full conversion pipeline.

    Usage:
        converter = DeckConverter(catalog)
        result = converter.convert(text, default_name="burn")
    """

    def __init__(self, catalog: CardCatalog, options: ConversionOptions | None = None) -> None:
        self._classifier = LineClassifier()
        self._resolver = CatalogResolver(catalog, options)
        self._assembler = DeckAssembler()

    def convert(self, raw_input: str, default_name: str | None = None) -> ConversionResult:
        """
        Convert deck text into a Deck.

        Args:
            raw_input: Deck list text in any supported dialect
            default_name: Name used when the text names no deck

        Returns:
            ConversionResult with the deck and diagnostics sorted by line

        Raises:
            EmptyDeckError: If no line resolved to a card
        """
        tokens = self._classifier.classify_text(normalize_text(raw_input))
        stream = recognize(tokens)
        resolution = self._resolver.resolve(stream)

        unrecognized = sum(
            1 for d in stream.diagnostics if d.kind == DiagnosticKind.UNRECOGNIZED_LINE
        )
        deck = self._assembler.assemble(
            resolution,
            default_name=default_name,
            unrecognized_count=unrecognized,
        )

        diagnostics = sorted(
            stream.diagnostics + resolution.diagnostics, key=lambda d: d.line_number
        )
        logger.info(
            "Converted %d lines into deck %r (%d cards, %d diagnostics)",
            len(tokens),
            deck.name,
            deck.card_count(),
            len(diagnostics),
        )
        return ConversionResult(deck=deck, diagnostics=diagnostics)


def convert_deck(
    raw_input: str,
    catalog: CardCatalog,
    options: ConversionOptions | None = None,
    default_name: str | None = None,
) -> ConversionResult:
    """Convenience function: build a converter and convert once."""
    return DeckConverter(catalog, options).convert(raw_input, default_name=default_name)
